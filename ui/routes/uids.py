"""Identifier issuing and inspection routes."""

from fastapi import APIRouter, HTTPException, status

from smalluid.uid import SmallUid

router = APIRouter(prefix="/api/v1", tags=["uid"])

# These will be set by app.py
_config = None
_logger = None


def init(config, logger):
    """Initialize with uid config and logger references."""
    global _config, _logger
    _config = config
    _logger = logger


@router.get("/uid")
async def issue(timestamp: int = None, random: int = None):
    """Issue one id; either part may be supplied by the caller."""
    if timestamp is None and random is None:
        uid = SmallUid.generate()
    elif random is None:
        uid = SmallUid.from_timestamp(timestamp)
    elif timestamp is None:
        uid = SmallUid.from_random(random)
    else:
        uid = SmallUid.from_parts(timestamp, random)
    return uid.to_dict(padded=_config.padded)


@router.get("/uids")
async def issue_batch(count: int = 10):
    """Issue a batch of ids in ascending order."""
    if not 1 <= count <= _config.max_batch:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"count must be between 1 and {_config.max_batch}",
        )
    uids = sorted(SmallUid.generate() for _ in range(count))
    return {"count": count, "uids": [uid.to_dict(padded=_config.padded) for uid in uids]}


@router.get("/uid/{text}")
async def inspect(text: str):
    """Decode a textual id into its parts."""
    uid = SmallUid.from_text(text)
    _logger.debug("uid inspected", uid=uid.text)
    return uid.to_dict(padded=_config.padded)
