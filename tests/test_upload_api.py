import pytest

from conftest import add_stored_objects
from fotospots.core.ids import SequentialIds, get_identifier_service
from fotospots.core.limits import MAX_FILE_SIZE_BYTES
from fotospots.services.photos import file_extension

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


def upload(client, name="photo.jpg", data=JPEG_BYTES, content_type="image/jpeg", folder=None):
    form = {"spotFolder": folder} if folder is not None else {}
    return client.post(
        "/api/upload",
        files={"file": (name, data, content_type)},
        data=form,
    )


def test_upload_stores_file_and_returns_public_url(client, ids):
    res = upload(client, folder="session-a")

    assert res.status_code == 201
    data = res.json()["data"]
    assert data == {
        "url": "http://testserver/storage/spot-photos/session-a/id-1.jpg",
        "path": "session-a/id-1.jpg",
        "spotFolder": "session-a",
    }

    served = client.get("/storage/spot-photos/session-a/id-1.jpg")
    assert served.status_code == 200
    assert served.content == JPEG_BYTES
    assert served.headers["content-type"] == "image/jpeg"


def test_upload_generates_folder_when_absent(client, ids):
    data = upload(client).json()["data"]

    assert data["spotFolder"] == "id-1"
    assert data["path"] == "id-1/id-2.jpg"


def test_extension_is_lower_cased(client, ids):
    data = upload(client, name="HAFEN.PNG", content_type="image/png", folder="f").json()["data"]
    assert data["path"] == "f/id-1.png"


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("a.JPG", "jpg"),
        ("sunset.webp", "webp"),
        ("no-extension", "jpg"),
        ("", "jpg"),
        (None, "jpg"),
        ("archive.tar.GZ", "gz"),
    ],
)
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected


def test_pdf_is_rejected_regardless_of_size(client, ids):
    res = upload(client, name="doc.pdf", data=b"%PDF", content_type="application/pdf")

    assert res.status_code == 400
    assert res.json() == {"error": "Ungültiges Dateiformat. Erlaubt: JPG, PNG, WebP."}


def test_file_over_10_mib_is_rejected(client, ids):
    big = b"\0" * (11 * 1024 * 1024)

    res = upload(client, data=big)

    assert res.status_code == 400
    assert res.json() == {"error": "Datei zu groß. Maximum: 10 MB."}


def test_file_of_exactly_10_mib_is_accepted(client, ids):
    res = upload(client, data=b"\0" * MAX_FILE_SIZE_BYTES, folder="edge")
    assert res.status_code == 201


def test_sixth_upload_into_full_folder_is_rejected(client, ids):
    add_stored_objects("full", 5)

    res = upload(client, folder="full")

    assert res.status_code == 400
    assert res.json() == {"error": "Maximum 5 Fotos pro Spot erlaubt."}


def test_quota_counts_only_the_target_folder(client, ids):
    add_stored_objects("other", 5)
    add_stored_objects("mine", 4)

    assert upload(client, folder="mine").status_code == 201
    assert upload(client, folder="mine").status_code == 400


def test_missing_file_is_a_bad_request(client, ids):
    res = client.post("/api/upload", data={"spotFolder": "f"})

    assert res.status_code == 400
    assert res.json() == {"error": "Keine Datei hochgeladen."}


def test_existing_path_is_never_overwritten(client, ids):
    first = upload(client, folder="clash")
    assert first.status_code == 201

    # A fresh sequence hands out "id-1" again
    client.app.dependency_overrides[get_identifier_service] = lambda: SequentialIds("id")
    res = upload(client, data=b"other-bytes", folder="clash")

    assert res.status_code == 500
    assert res.json() == {"error": "Fehler beim Hochladen der Datei."}
    assert client.get("/storage/spot-photos/clash/id-1.jpg").content == JPEG_BYTES


def test_unknown_object_is_404(client):
    assert client.get("/storage/spot-photos/nope/missing.jpg").status_code == 404
    assert client.get("/storage/other-bucket/nope/missing.jpg").status_code == 404
