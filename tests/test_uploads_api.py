"""
Test file endpoints under /api.
"""
from app.services.upload_policy import MAX_FILE_SIZE

PDF_BYTES = b"%PDF-1.4\n1 0 obj<<>>endobj\n%%EOF"


class TestUploadEndpoints:
    """Test POST /api/upload, /api/upload-pdf-direct and /api/upload-multiple."""

    def test_upload_pdf(self, client):
        response = client.post(
            "/api/upload",
            files={"archivo": ("Hoja de Vida.pdf", PDF_BYTES, "application/pdf")}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["isPDF"] is True
        assert data["resource_type"] == "raw"
        assert data["nombre"] == "Hoja de Vida.pdf"
        assert data["size"] == len(PDF_BYTES)
        assert data["public_id"].startswith("uploads/archivo_hoja_de_vida_")
        assert data["pdfUrls"]["download"].endswith("?fl_attachment=Hoja%20de%20Vida.pdf")

    def test_upload_image(self, client):
        response = client.post("/api/upload", files={"archivo": ("foto.png", b"\x89PNG", "image/png")})

        assert response.status_code == 200
        assert response.json()["isPDF"] is False
        assert "urls" in response.json()

    def test_no_file(self, client):
        response = client.post("/api/upload")

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_disallowed_type(self, client, storage):
        response = client.post("/api/upload", files={"archivo": ("notas.txt", b"hola", "text/plain")})

        assert response.status_code == 415
        assert response.json()["error"] == "INVALID_FILE_TYPE"
        assert storage.calls == []

    def test_file_too_large(self, client, storage):
        content = b"0" * (MAX_FILE_SIZE + 1)

        response = client.post("/api/upload", files={"archivo": ("foto.png", content, "image/png")})

        assert response.status_code == 413
        assert response.json()["error"] == "FILE_TOO_LARGE"
        assert storage.calls == []

    def test_direct_pdf(self, client):
        response = client.post(
            "/api/upload-pdf-direct",
            files={"archivo": ("contrato.pdf", PDF_BYTES, "application/octet-stream")}
        )

        assert response.status_code == 200
        assert response.json()["upload_method"] == "direct"
        assert response.json()["tipo"] == "application/pdf"

    def test_direct_rejects_image(self, client):
        response = client.post("/api/upload-pdf-direct", files={"archivo": ("foto.png", b"\x89PNG", "image/png")})
        assert response.status_code == 400

    def test_upload_multiple(self, client):
        response = client.post("/api/upload-multiple", files=[
            ("archivos", ("cedula.pdf", PDF_BYTES, "application/pdf")),
            ("archivos", ("foto.jpg", b"\xff\xd8\xff", "image/jpeg")),
        ])

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["files"][0]["public_id"].startswith("uploads/archivos_cedula_")
        assert [f["isPDF"] for f in data["files"]] == [True, False]

    def test_upload_multiple_over_limit(self, client, storage):
        files = [("archivos", (f"{i}.png", b"\x89PNG", "image/png")) for i in range(11)]

        response = client.post("/api/upload-multiple", files=files)

        assert response.status_code == 400
        assert response.json()["error"] == "LIMIT_FILE_COUNT"
        assert storage.calls == []

    def test_upload_multiple_without_files(self, client):
        response = client.post("/api/upload-multiple")
        assert response.status_code == 400


class TestFileEndpoints:
    """Test URL, delete and info endpoints."""

    def test_download_urls_for_pdf(self, client):
        response = client.get("/api/download/uploads/cv.pdf", params={"filename": "cv.pdf", "isPDF": "true"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert "/raw/upload/fl_attachment/uploads/cv.pdf" in data["downloadUrl"]
        assert data["viewUrl"] == data["directUrl"]

    def test_download_urls_for_image(self, client):
        response = client.get("/api/download/uploads/foto")

        data = response.json()
        assert "viewUrl" not in data
        assert data["directUrl"].endswith("/image/upload/uploads/foto")

    def test_delete_with_raw_fallback(self, client, storage):
        storage.put("uploads/cv.pdf", "raw")

        response = client.delete("/api/delete/uploads/cv.pdf")

        assert response.status_code == 200
        assert response.json()["message"] == "Archivo eliminado exitosamente"
        assert [c[2] for c in storage.calls] == ["auto", "raw"]

    def test_delete_missing(self, client):
        response = client.delete("/api/delete/uploads/nada")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "No se pudo eliminar el archivo",
            "result": {"result": "not found"},
        }

    def test_pdf_urls(self, client):
        response = client.get("/api/pdf/uploads/cv.pdf", params={"filename": "cv.pdf"})

        assert response.status_code == 200
        data = response.json()
        assert data["public_id"] == "uploads/cv.pdf"
        assert set(data["pdfUrls"]) == {"download", "view", "direct"}

    def test_pdf_download_redirect(self, client):
        response = client.get(
            "/api/pdf/uploads/cv.pdf",
            params={"filename": "cv.pdf", "download": "true"},
            follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"].endswith("?fl_attachment=cv.pdf")

    def test_file_info(self, client, storage):
        storage.put("uploads/cv.pdf", "raw")

        response = client.get("/api/file-info/uploads/cv.pdf")

        assert response.status_code == 200
        data = response.json()
        assert data["isPDF"] is True
        assert data["resource_type"] == "raw"
        assert data["info"]["public_id"] == "uploads/cv.pdf"

    def test_file_info_missing(self, client):
        response = client.get("/api/file-info/uploads/nada")

        assert response.status_code == 500
        assert response.json()["message"] == "Error al obtener información del archivo"
