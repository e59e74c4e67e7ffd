import base64
import binascii

from tabsplit.schemas.base import CamelModel


class ScanRequest(CamelModel):
    image_base64: str
    mime_type: str = "image/jpeg"

    def image_bytes(self) -> bytes:
        """Decode the image, accepting either bare base64 or a ``data:`` URL."""
        data = self.image_base64
        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]
        try:
            return base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 image data: {e}") from e
