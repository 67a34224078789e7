"""Download the GLM-4.6 tokenizer into the package's assets directory.

The tokenizer JSON is too large to keep in version control; run this once
before building a distribution or running the GLM-vocabulary tests.

    python scripts/fetch_assets.py [--revision main] [--force]
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

import httpx

from glm_tokens import Encoder, bundled_tokenizer_path

logger = logging.getLogger("glm_tokens")

DEFAULT_URL = "https://huggingface.co/zai-org/GLM-4.6/resolve/{revision}/tokenizer.json"

_RETRY_DEFAULTS = {
    "max_retries": 3,
    "base_ms": 500,
    "cap_ms": 10_000,
}


def download(url: str) -> bytes:
    attempt = 0
    while True:
        try:
            with httpx.Client(timeout=60, follow_redirects=True) as client:
                resp = client.get(url)
            if resp.is_success:
                return resp.content
            if 400 <= resp.status_code < 500:
                raise SystemExit(f"[glm-tokens] non-retryable {resp.status_code} from {url}")
            raise httpx.HTTPStatusError(
                f"HTTP {resp.status_code}", request=resp.request, response=resp
            )
        except httpx.HTTPError as exc:
            if attempt >= _RETRY_DEFAULTS["max_retries"]:
                raise SystemExit(
                    f"[glm-tokens] giving up after {attempt + 1} attempts: {exc}"
                ) from exc
            backoff_s = min(_RETRY_DEFAULTS["base_ms"] * (2**attempt), _RETRY_DEFAULTS["cap_ms"]) / 1000
            logger.warning("[glm-tokens] download failed (%s); retrying in %.1fs", exc, backoff_s)
            time.sleep(backoff_s)
            attempt += 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--revision", default="main")
    parser.add_argument("--url", default=None, help="override the download URL")
    parser.add_argument("--force", action="store_true", help="replace an existing asset")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    dest = bundled_tokenizer_path()
    if dest.exists() and not args.force:
        logger.info("[glm-tokens] %s already present; use --force to replace it", dest)
        return 0

    url = args.url or DEFAULT_URL.format(revision=args.revision)
    logger.info("[glm-tokens] Downloading %s", url)
    data = download(url)

    # Refuse to install anything the encoder cannot load.
    encoder = Encoder.from_bytes(data)
    dest.write_bytes(data)
    logger.info("[glm-tokens] Wrote %s (%d bytes, vocab_size=%d)", dest, len(data), encoder.vocab_size)
    return 0


if __name__ == "__main__":
    sys.exit(main())
