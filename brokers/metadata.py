# file: metadata.py
"""Property metadata documents and publishing them to IPFS through the upload backend.

The backend exposes ``POST /upload_json`` (JSON body) and ``POST /upload``
(multipart ``file``); both answer ``{"cid": "..."}``.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from brokers.config import IPFS_BACKEND_URL, IPFS_GATEWAY_URL, IPFS_TIMEOUT
from brokers.errors import MetadataUploadError

logger = logging.getLogger(__name__)

IPFS_SCHEME = "ipfs://"


def build_property_metadata(
    name: str,
    address: str,
    description: str,
    image: str,
    attributes: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """ERC-721 metadata JSON for one property. `attributes` maps trait name -> value."""
    traits: List[Dict[str, Any]] = [
        {"trait_type": trait, "value": value} for trait, value in (attributes or {}).items()
    ]
    return {
        "name": name,
        "address": address,
        "description": description,
        "image": image,
        "attributes": traits,
    }


def upload_json_to_ipfs(json_data: Dict[str, Any], backend_url: str = IPFS_BACKEND_URL) -> str:
    """Publish a dict as JSON and return its ``ipfs://<cid>`` URI."""
    cid = _post(f"{backend_url}/upload_json", json=json_data)
    logger.info("[IPFS] uploaded JSON, CID: %s", cid)
    return f"{IPFS_SCHEME}{cid}"


def upload_file_to_ipfs(file_path: Union[str, Path], backend_url: str = IPFS_BACKEND_URL) -> str:
    """Publish a file and return its CID."""
    with open(file_path, "rb") as f:
        cid = _post(f"{backend_url}/upload", files={"file": f})
    logger.info("[IPFS] uploaded %s, CID: %s", file_path, cid)
    return cid


def publish_property(
    name: str,
    address: str,
    description: str,
    image_path: Union[str, Path],
    attributes: Optional[Dict[str, Any]] = None,
    backend_url: str = IPFS_BACKEND_URL,
) -> str:
    """Upload the image, then the metadata pointing at it. Returns the metadata URI to mint with."""
    image_cid = upload_file_to_ipfs(image_path, backend_url=backend_url)
    metadata = build_property_metadata(
        name, address, description, gateway_url(IPFS_SCHEME + image_cid), attributes
    )
    return upload_json_to_ipfs(metadata, backend_url=backend_url)


def gateway_url(uri: str, gateway: str = IPFS_GATEWAY_URL) -> str:
    """``ipfs://<cid>/path`` -> ``<gateway><cid>/path``. Other URIs are returned unchanged."""
    if not uri.startswith(IPFS_SCHEME):
        return uri
    return gateway.rstrip("/") + "/" + uri[len(IPFS_SCHEME):]


def _post(url: str, **kwargs) -> str:
    try:
        response = requests.post(url, timeout=IPFS_TIMEOUT, **kwargs)
        response.raise_for_status()
        return response.json()["cid"]
    except requests.exceptions.RequestException as e:
        logger.error("[IPFS] request to %s failed: %s", url, e)
        raise MetadataUploadError(f"Could not upload to IPFS via backend: {e}") from e
    except (KeyError, ValueError) as e:
        raise MetadataUploadError(f"Unexpected response from IPFS backend at {url}") from e
