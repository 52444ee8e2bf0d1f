"""Helpers shared by the API tests."""

import io

from PIL import Image

from models.upload import Upload

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "0777"


def make_image_bytes(image_format: str = "PNG", size=(8, 8)) -> bytes:
    """Build a small real image in memory."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=image_format)
    return buffer.getvalue()


def post_upload(test_client, public_text="Sunset", private_text=None, folder_name=None,
                image=None, filename="photo.png", with_file=True):
    data = {}
    if public_text is not None:
        data["publicText"] = public_text
    if private_text is not None:
        data["privateText"] = private_text
    if folder_name is not None:
        data["folderName"] = folder_name
    if with_file:
        data["file"] = (io.BytesIO(image if image is not None else make_image_bytes()), filename)
    return test_client.post("/api/uploads", data=data, content_type="multipart/form-data")


def login(test_client, username=ADMIN_USERNAME, password=ADMIN_PASSWORD):
    return test_client.post("/api/login", json={"username": username, "password": password})


def count_uploads(app) -> int:
    with app.app_context():
        return Upload.query.count()
