"""
Tests for the manifest downloader.
"""

import base64
import io
import urllib.error
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from deployer.adapters.downloader import ManifestDownloader
from deployer.core.errors import ArtifactFetchError
from deployer.core.models.artifact import Artifact

from tests.factories import make_config_map


@pytest.fixture
def config_map_yaml() -> str:
    return yaml.safe_dump(make_config_map())


class TestManifestDownloader:

    def test_embedded_base64(self, config_map_yaml: str):
        payload = base64.b64encode(config_map_yaml.encode()).decode()
        manifest = ManifestDownloader().download_manifest(Artifact(type="embedded/base64", reference=payload))
        assert manifest.kind == "ConfigMap"
        assert manifest.name == "settings"

    def test_local_file_relative_to_base_dir(self, tmp_path: Path, config_map_yaml: str):
        (tmp_path / "cm.yml").write_text(config_map_yaml)
        manifest = ManifestDownloader(base_dir=tmp_path).download_manifest(
            Artifact(type="local/file", reference="cm.yml"),
        )
        assert manifest.name == "settings"

    def test_http_file(self, config_map_yaml: str):
        with patch("deployer.adapters.downloader.urllib.request.urlopen") as mock_open:
            mock_open.return_value.__enter__.return_value = io.BytesIO(config_map_yaml.encode())
            manifest = ManifestDownloader().download_manifest(
                Artifact(type="http/file", reference="https://example.com/cm.yml"),
            )
        assert manifest.kind == "ConfigMap"
        request = mock_open.call_args[0][0]
        assert request.full_url == "https://example.com/cm.yml"

    def test_http_error_wrapped(self):
        with patch(
            "deployer.adapters.downloader.urllib.request.urlopen",
            side_effect=urllib.error.URLError("connection refused"),
        ):
            with pytest.raises(ArtifactFetchError) as exc_info:
                ManifestDownloader().download_manifest(
                    Artifact(type="http/file", reference="https://example.com/cm.yml"),
                )
        assert exc_info.value.reference == "https://example.com/cm.yml"
        assert isinstance(exc_info.value.__cause__, urllib.error.URLError)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ArtifactFetchError, match="missing.yml"):
            ManifestDownloader(base_dir=tmp_path).download_manifest(
                Artifact(type="local/file", reference="missing.yml"),
            )

    def test_bad_base64(self):
        with pytest.raises(ArtifactFetchError):
            ManifestDownloader().download_manifest(Artifact(type="embedded/base64", reference="!!not-b64!!"))

    def test_bad_yaml(self, tmp_path: Path):
        (tmp_path / "bad.yml").write_text("kind: [oops")
        with pytest.raises(ArtifactFetchError) as exc_info:
            ManifestDownloader(base_dir=tmp_path).download_manifest(
                Artifact(type="local/file", reference="bad.yml"),
            )
        assert isinstance(exc_info.value.__cause__, yaml.YAMLError)

    def test_document_without_kind(self, tmp_path: Path):
        (tmp_path / "nokind.yml").write_text("metadata: {name: x}\n")
        with pytest.raises(ArtifactFetchError, match="no 'kind'"):
            ManifestDownloader(base_dir=tmp_path).download_manifest(
                Artifact(type="local/file", reference="nokind.yml"),
            )

    def test_document_without_name(self, tmp_path: Path):
        (tmp_path / "noname.yml").write_text("kind: ConfigMap\nmetadata: {}\n")
        with pytest.raises(ArtifactFetchError, match="no 'metadata.name'"):
            ManifestDownloader(base_dir=tmp_path).download_manifest(
                Artifact(type="local/file", reference="noname.yml"),
            )

    def test_unsupported_type(self):
        with pytest.raises(ArtifactFetchError, match="unsupported artifact type"):
            ManifestDownloader().download_manifest(Artifact(type="s3/object", reference="s3://b/k"))

    def test_empty_reference(self):
        with pytest.raises(ArtifactFetchError, match="no reference"):
            ManifestDownloader().download_manifest(Artifact(type="local/file"))
