import json

import pytest

import process_upload
from modi_upload.errors import UploadError

from conftest import encode_image


class FakeUploader:
    def __init__(self, error=None):
        self.error = error
        self.uploaded = []

    def upload_many(self, assets):
        if self.error:
            raise self.error
        self.uploaded.extend(assets)
        return [f"https://cdn.example/{asset.name}" for asset in assets]


@pytest.fixture
def image_files(tmp_path):
    first = tmp_path / 'front.jpg'
    first.write_bytes(encode_image(640, 480))
    second = tmp_path / 'side.png'
    second.write_bytes(encode_image(2400, 1200, fmt='PNG'))
    return [str(first), str(second)]


def test_process_images_without_upload(image_files):
    result = process_upload.process_images(image_files)

    assert result['success'] is True
    assert result['error'] is None
    assert [image['name'] for image in result['images']] == ['front.webp', 'side.webp']
    assert result['images'][1]['width'] == 1600
    assert result['uploaded_urls'] == []
    json.dumps(result)


def test_process_images_with_upload(image_files):
    uploader = FakeUploader()
    result = process_upload.process_images(image_files, upload=True, uploader=uploader)

    assert result['success'] is True
    assert result['uploaded_urls'] == [
        'https://cdn.example/front.webp',
        'https://cdn.example/side.webp',
    ]


def test_unsupported_file_fails_whole_batch(image_files, tmp_path):
    notes = tmp_path / 'notes.txt'
    notes.write_text('not an image')

    result = process_upload.process_images([image_files[0], str(notes), image_files[1]])

    assert result['success'] is False
    assert result['error'] == "Only image files can be uploaded"
    assert result['images'] == []


def test_upload_failure_is_reported(image_files):
    uploader = FakeUploader(error=UploadError("Authentication failed - please log in again"))
    result = process_upload.process_images(image_files, upload=True, uploader=uploader)

    assert result['success'] is False
    assert 'Authentication failed' in result['error']
    assert result['uploaded_urls'] == []


def test_main_prints_machine_readable_result(image_files, monkeypatch, capsys):
    monkeypatch.setattr('sys.argv', ['process_upload.py', image_files[0]])

    with pytest.raises(SystemExit) as exc_info:
        process_upload.main()

    assert exc_info.value.code == 0
    line = [l for l in capsys.readouterr().out.splitlines() if l.startswith('PYTHON_RESULT:')][0]
    payload = json.loads(line[len('PYTHON_RESULT:'):])
    assert payload['images'][0]['name'] == 'front.webp'


def test_main_without_arguments_exits(monkeypatch):
    monkeypatch.setattr('sys.argv', ['process_upload.py'])
    with pytest.raises(SystemExit) as exc_info:
        process_upload.main()
    assert exc_info.value.code == 1
