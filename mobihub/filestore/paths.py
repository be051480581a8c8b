"""
Functions for building the remote paths where MobiHub artifacts are kept in the file store.

Artifacts are spread across a two-level directory hierarchy derived from the owning entity's
numeric identifier (``id // 100`` and ``id % 100``, each zero-padded to two digits) so that no
single remote directory grows too large.
"""
from typing import List

TRAFFIC_MODEL_DIR_TEMPLATE = "trafficModels/%02d/%02d"
PROFILE_PICTURE_DIR_TEMPLATE = "users/%02d/%02d"

def split_remote_path(path: str) -> List[str]:
    """
    split a slash-delimited remote path into its segments, ignoring empty segments
    """
    return [p for p in (path or '').split('/') if p]

def parent_dirs(path: str) -> List[str]:
    """
    return the ancestor directories of the given remote file path, shortest first.  For
    example, ``a/b/c/file.zip`` returns ``["a", "a/b", "a/b/c"]``.
    """
    parts = split_remote_path(path)[:-1]
    return ['/'.join(parts[:i+1]) for i in range(len(parts))]

def _bucket(template: str, id: int) -> str:
    return template % (id // 100, id % 100)

def traffic_model_dir(model_id: int) -> str:
    """
    return the remote directory holding the files of the traffic model with the given ID
    """
    return _bucket(TRAFFIC_MODEL_DIR_TEMPLATE, model_id)

def traffic_model_zip(model_id: int, token) -> str:
    """
    return the remote path of a traffic model's dataset archive
    :param int model_id:  the traffic model's identifier
    :param token:         the unique token (usually a UUID) naming the archive
    """
    return f"{traffic_model_dir(model_id)}/{token}.zip"

def traffic_model_image(model_id: int, token, ext: str) -> str:
    """
    return the remote path of an image attached to a traffic model
    """
    return f"{traffic_model_dir(model_id)}/images/{token}.{ext.lstrip('.')}"

def profile_picture(user_id: int, token, ext: str) -> str:
    """
    return the remote path of a user's profile picture
    """
    return f"{_bucket(PROFILE_PICTURE_DIR_TEMPLATE, user_id)}/{token}.{ext.lstrip('.')}"
