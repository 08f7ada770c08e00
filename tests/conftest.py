from __future__ import annotations

import io
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest
from s3src import S3Src, S3SrcSettings

if TYPE_CHECKING:
    from collections.abc import Generator

    from botocore.client import BaseClient
    from pytest_databases._service import DockerService


@dataclass
class MinioService:
    endpoint: str
    access_key: str
    secret_key: str
    secure: bool


class FakeObject:
    """In-memory object answering HEAD and ranged GET like S3 does."""

    def __init__(self, data: bytes):
        self.data = data

    def head_object(self, **kwargs) -> dict:
        return {"ContentLength": len(self.data)}

    def get_object(self, **kwargs) -> dict:
        unit, _, spec = kwargs["Range"].partition("=")
        assert unit == "bytes"
        start, _, end = spec.partition("-")
        return {"Body": io.BytesIO(self.data[int(start) : int(end) + 1])}


@pytest.fixture
def object_data() -> bytes:
    return bytes(range(256)) * 4


@pytest.fixture
def fake_client(object_data: bytes) -> MagicMock:
    """A MagicMock S3 client backed by ``object_data``."""
    fake = FakeObject(object_data)
    client = MagicMock()
    client.head_object.side_effect = fake.head_object
    client.get_object.side_effect = fake.get_object
    return client


@pytest.fixture
def settings() -> S3SrcSettings:
    return S3SrcSettings(access_key="AKIDEXAMPLE", secret_key="secret")


@pytest.fixture
def source(
    settings: S3SrcSettings, fake_client: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> S3Src:
    """An S3Src whose connector hands out ``fake_client``."""
    monkeypatch.setattr("s3src.source.connect", lambda url, settings: fake_client)
    return S3Src(settings)


@pytest.fixture(scope="session")
def minio_access_key() -> str:
    return os.getenv("MINIO_ACCESS_KEY", "minio")


@pytest.fixture(scope="session")
def minio_secret_key() -> str:
    return os.getenv("MINIO_SECRET_KEY", "minio123")


@pytest.fixture(scope="session")
def minio_secure() -> bool:
    return os.getenv("MINIO_SECURE", "false").lower() in {
        "true",
        "1",
        "yes",
        "y",
        "t",
        "on",
    }


@pytest.fixture(scope="session")
def minio_service_name() -> str:
    return "minio-s3src"


@pytest.fixture(scope="session")
def minio_service(
    docker_service: DockerService,
    minio_access_key: str,
    minio_secret_key: str,
    minio_secure: bool,
    minio_service_name: str,
) -> Generator[MinioService]:
    from urllib.error import URLError
    from urllib.request import Request, urlopen

    from pytest_databases.types import ServiceContainer

    def check(_service: ServiceContainer) -> bool:
        scheme = "https" if minio_secure else "http"
        url = f"{scheme}://{_service.host}:{_service.port}/minio/health/ready"
        if not url.startswith(("http:", "https:")):
            msg = "URL must start with 'http:' or 'https:'"
            raise ValueError(msg)
        try:
            with urlopen(url=Request(url, method="GET"), timeout=10) as response:
                return response.status == 200
        except (URLError, ConnectionError):
            return False

    with docker_service.run(
        image="quay.io/minio/minio",
        name=minio_service_name,
        command="server /data",
        container_port=9000,
        timeout=20,
        pause=0.5,
        env={
            "MINIO_ROOT_USER": minio_access_key,
            "MINIO_ROOT_PASSWORD": minio_secret_key,
        },
        check=check,
    ) as service:
        yield MinioService(
            endpoint=f"{service.host}:{service.port}",
            access_key=minio_access_key,
            secret_key=minio_secret_key,
            secure=minio_secure,
        )


def _endpoint(minio_service: MinioService) -> str:
    scheme = "https" if minio_service.secure else "http"
    return f"{scheme}://{minio_service.endpoint}"


@pytest.fixture
def minio_settings(minio_service: MinioService) -> S3SrcSettings:
    return S3SrcSettings(
        endpoint=_endpoint(minio_service),
        access_key=minio_service.access_key,
        secret_key=minio_service.secret_key,
        addressing_style="path",
    )


@pytest.fixture
def minio_s3_client(minio_service: MinioService) -> BaseClient:
    """Create a boto3 S3 client for the MinIO service."""
    import boto3
    from botocore.config import Config

    return boto3.client(
        "s3",
        endpoint_url=_endpoint(minio_service),
        aws_access_key_id=minio_service.access_key,
        aws_secret_access_key=minio_service.secret_key,
        region_name="us-east-1",
        config=Config(s3={"addressing_style": "path"}),
    )


@pytest.fixture
def ensure_bucket():
    from botocore.exceptions import ClientError

    def _ensure_bucket(client, bucket: str) -> None:
        try:
            client.head_bucket(Bucket=bucket)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code not in {"404", "NoSuchBucket", "NotFound"}:
                raise
            client.create_bucket(Bucket=bucket)

    return _ensure_bucket
