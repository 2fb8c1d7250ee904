"""
Blob URL parser for the Thumbnail Service.
"""

from urllib.parse import urlparse, unquote

from thumbnail_service.api.schemas import BlobData
from thumbnail_service.core.exceptions import MalformedBlobPathError

PUBLIC_SEGMENT = "public"

# Minimum number of path segments (container included) per layout:
#   public:  <container>/public/<area>/<user>/<name>
#   private: <container>/<user>/<area>/<name>
MIN_PUBLIC_SEGMENTS = 5
MIN_PRIVATE_SEGMENTS = 4


class BlobUrlParser:
    """
    Maps a blob URL onto container, owner and object name.
    """

    def parse_blob(self, blob_url: str) -> BlobData:
        """
        Parse a blob URL into a BlobData.

        Args:
            blob_url: Absolute URL, e.g. https://<account>.dfs.core.windows.net/<container>/...

        Returns:
            BlobData for the URL

        Raises:
            MalformedBlobPathError: If the path has too few segments for its layout
        """
        path = urlparse(blob_url).path
        segments = [unquote(s) for s in path.split("/") if s]

        if len(segments) < 2:
            raise MalformedBlobPathError(path, "expected at least a container and one path segment")

        is_public = segments[1] == PUBLIC_SEGMENT
        required = MIN_PUBLIC_SEGMENTS if is_public else MIN_PRIVATE_SEGMENTS

        if len(segments) < required:
            layout = "public" if is_public else "private"
            raise MalformedBlobPathError(
                path, f"{layout} paths need at least {required} segments, got {len(segments)}"
            )

        container_name = segments[0]

        return BlobData(
            # Every occurrence of the container name is stripped, not only the first segment
            relative_path="/".join(segments).replace(container_name, ""),
            container_name=container_name,
            owner_id=segments[3] if is_public else segments[1],
            object_name=segments[4] if is_public else segments[3],
            is_public=is_public,
        )
