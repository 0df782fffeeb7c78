import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from hopehub.core.errors import UploadError
from hopehub.media.uploader import MediaUploader, UploadFile, UploadResult
from hopehub.storage.memory_gateway import InMemoryGateway
from hopehub.workflows.submission import RequestForm


class TickingClock:
    """Server clock that moves forward one minute per write."""

    def __init__(self, start=datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


class FakeUploader(MediaUploader):
    """Records uploads in order; fails for the named files."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls = []
        self.active = 0
        self.max_active = 0

    async def upload(self, file, on_progress=None):
        self.calls.append(file.name)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            if file.name in self.fail_on:
                raise UploadError("Upload failed with status 500", file_name=file.name)
            if on_progress:
                on_progress(40)
                on_progress(80)
            return UploadResult(url=f"https://cdn.example.org/{file.name}")
        finally:
            self.active -= 1


def image(name="proof.jpg", size=1024, content_type="image/jpeg"):
    return UploadFile(name=name, content_type=content_type, data=b"\xff" * size)


def pdf(name="letter.pdf", size=2048):
    return UploadFile(name=name, content_type="application/pdf", data=b"%PDF" + b"0" * size)


def request_form(**overrides):
    values = dict(
        name="Nimal Perera",
        contact="0771234567",
        district="Colombo",
        city="Dehiwala",
        description="Books lost in the flood",
        map_link="",
        request_type="student",
        items=["Exercise books", "Pens"],
    )
    values.update(overrides)
    return RequestForm(**values)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def gateway(clock):
    return InMemoryGateway(clock=clock)


@pytest.fixture
def uploader():
    return FakeUploader()
