"""diskprobe - block device discovery for attached virtual disks.

Maps a LUN (the attachment slot of a virtual disk) to the block device the
guest kernel created for it:
- Several naming schemes are probed in a fixed priority order
- Attachment is asynchronous, so callers can wait with a deadline
- All probing is read-only and side-effect free
"""

__version__ = "0.1.0"
