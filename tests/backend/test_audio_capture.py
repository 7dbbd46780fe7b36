import pytest

from src.inside_notes.infra.storage.audio import LocalAudioStorageBackend
from src.inside_notes.services.annotations.audio import StoredAudioInput


async def test_stored_capture_buffers_chunks_and_deletes_on_release(tmp_path):
    audio_input = StoredAudioInput(LocalAudioStorageBackend(tmp_path))

    capture = await audio_input.acquire(mime_type="audio/ogg")
    capture.write(b"RIFF")
    capture.write(b"data")

    assert capture.mime_type == "audio/ogg"
    assert capture.finish() == b"RIFFdata"
    assert len(list(tmp_path.iterdir())) == 1

    capture.release()
    capture.release()

    assert capture.released
    assert list(tmp_path.iterdir()) == []
    with pytest.raises(RuntimeError):
        capture.write(b"late")
