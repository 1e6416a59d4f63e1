"""Download, cache and run ROM / emulator packages."""

import base64
import hashlib
import shutil
import subprocess
import tempfile
import zipfile
from pathlib import Path
from typing import Protocol

import httpx

from ..config import resolve_home
from ..logging_config import get_logger

logger = get_logger(__name__)

ZIP_CONTENT_TYPES = ("application/zip", "application/octet-stream")
SUCCESS_MARKER = "SUCCESS"


class FlashError(RuntimeError):
    """A package could not be fetched, verified or run."""


class IPackageRetriever(Protocol):
    """Cached access to zipped packages with an entry-point script."""

    def fetch(self, url: str) -> Path:
        """Download and extract ``url`` unless cached; return its directory."""
        ...

    def run_script(self, directory: Path, script: str) -> int:
        """Run ``script`` inside ``directory`` and return its exit status."""
        ...


def cache_key(url: str) -> str:
    """Filesystem-safe key derived from the package URL."""
    digest = hashlib.md5(url.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


class PackageRetriever:
    """Downloads packages into ``<home>/roms/<key>`` with httpx."""

    def __init__(
        self,
        home: Path | None = None,
        client: httpx.Client | None = None,
        timeout: float = 60.0,
    ):
        self._roms_dir = (home or resolve_home()) / "roms"
        self._client = client
        self._timeout = timeout

    def package_dir(self, url: str) -> Path:
        return self._roms_dir / cache_key(url)

    def fetch(self, url: str) -> Path:
        out_dir = self.package_dir(url)
        if (out_dir / SUCCESS_MARKER).exists():
            logger.info("Package already downloaded: %s", out_dir)
            return out_dir

        shutil.rmtree(out_dir, ignore_errors=True)
        out_dir.mkdir(parents=True)
        try:
            with tempfile.TemporaryFile() as archive:
                self._download(url, archive)
                archive.seek(0)
                self._extract(archive, out_dir)
        except httpx.HTTPError as e:
            raise FlashError(f"Failed to download zip: {e}") from e
        except (zipfile.BadZipFile, OSError) as e:
            raise FlashError(f"Failed to extract zip: {e}") from e

        (out_dir / SUCCESS_MARKER).touch()
        return out_dir

    def _download(self, url: str, archive) -> None:
        client = self._client or httpx.Client(timeout=self._timeout, follow_redirects=True)
        try:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                content_type = response.headers.get("content-type", "").split(";")[0].strip()
                if content_type not in ZIP_CONTENT_TYPES:
                    raise FlashError(
                        f"URL must be a zip file: {response.url}.\n"
                        f"Found Content-Type: {content_type}."
                    )
                logger.info("Downloading %s", url)
                for chunk in response.iter_bytes():
                    archive.write(chunk)
        except (httpx.UnsupportedProtocol, httpx.InvalidURL) as e:
            raise FlashError(f"Invalid URL: {url}") from e
        finally:
            if client is not self._client:
                client.close()

    def _extract(self, archive, out_dir: Path) -> None:
        root = out_dir.resolve()
        with zipfile.ZipFile(archive) as zf:
            for member in zf.infolist():
                target = (out_dir / member.filename).resolve()
                if not target.is_relative_to(root):
                    raise FlashError(f"Zip entry escapes package directory: {member.filename}")
                logger.debug("Extracting %s", member.filename)
                zf.extract(member, out_dir)

    def run_script(self, directory: Path, script: str) -> int:
        path = directory / script
        if not path.exists():
            raise FlashError(f"Invalid package. {script} script does not exist.")
        path.chmod(path.stat().st_mode | 0o111)
        logger.info("Running %s in %s", script, directory)
        return subprocess.run([f"./{script}"], cwd=directory).returncode
