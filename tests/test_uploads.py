import base64

import pytest

from glowiva.core.errors import ValidationError
from glowiva.services.uploads import decode_data_url, sanitize_name

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-body"


def data_url(content=PNG_BYTES, ext="png"):
    return f"data:image/{ext};base64,{base64.b64encode(content).decode()}"


class TestDecoding:

    def test_decodes_extension_and_bytes(self):
        assert decode_data_url(data_url()) == ("png", PNG_BYTES)

    @pytest.mark.parametrize("value", [
        "not a data url",
        "data:text/plain;base64,aGVsbG8=",
        "data:image/png;base64,@@@@",
        "data:image/exe;base64,aGVsbG8=",
    ])
    def test_rejects_malformed_payloads(self, value):
        with pytest.raises(ValidationError):
            decode_data_url(value)

    def test_sanitize_name(self):
        assert sanitize_name("../../etc/passwd") == "passwd"
        assert sanitize_name("my photo.png") == "my_photo"
        assert sanitize_name("...") == "image"


class TestUploadApi:

    def test_upload_then_fetch(self, client, employee_headers):
        response = client.post(
            "/api/uploads/image",
            json={"image_data": data_url(), "file_name": "serum"},
            headers=employee_headers,
        )

        assert response.status_code == 201
        image_url = response.json()["image_url"]
        assert image_url.startswith("/api/uploads/serum_")
        assert image_url.endswith(".png")

        served = client.get(image_url)
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_upload_requires_token(self, client):
        response = client.post("/api/uploads/image", json={"image_data": data_url(), "file_name": "x"})
        assert response.status_code == 401

    def test_oversized_upload_rejected(self, client, employee_headers):
        response = client.post(
            "/api/uploads/image",
            json={"image_data": data_url(b"x" * 2048), "file_name": "big"},
            headers=employee_headers,
        )

        assert response.status_code == 400

    def test_missing_file_is_404(self, client):
        assert client.get("/api/uploads/nothing_here.png").status_code == 404

    def test_hidden_or_odd_names_rejected(self, client):
        assert client.get("/api/uploads/.env").status_code == 400
        assert client.get("/api/uploads/bad%20name.png").status_code == 400
