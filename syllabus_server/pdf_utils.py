# -*- coding: utf-8 -*-
import io
import logging
import tempfile
from pathlib import Path

import pdfplumber
import requests

from . import config


logger = logging.getLogger(__name__)

TEXT_SUFFIXES = (".txt", ".md")


def _is_url(path_or_url: str) -> bool:
    return path_or_url.startswith('http://') or path_or_url.startswith('https://')


def _load_document_path(path_or_url: str) -> str:
    """
    Loads a document from a local path or a URL and returns the local file path.
    :param path_or_url: A local file path or a URL to a PDF or text file.
    :return: The local file path to the document.
    """
    if _is_url(path_or_url):
        response = requests.get(path_or_url, timeout=config.SYLLABUS_REQUEST_TIMEOUT)
        response.raise_for_status()
        suffix = Path(path_or_url.split('?', 1)[0]).suffix.lower() or ".pdf"
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp_file:
            tmp_file.write(response.content)
            return tmp_file.name
    path = Path(path_or_url)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    return str(path)


def _pages_to_text(pdf) -> str:
    pages: list[str] = []
    for page in pdf.pages:
        text = page.extract_text()
        if text:
            pages.append(text.strip())
    # Form feed marks the page break; the normalizer turns it into a newline.
    return "\n\f".join(pages)


def extract_text_from_content(content: bytes) -> str:
    """
    Extracts text from raw PDF bytes (an upload body).
    :param content: The PDF file contents.
    :return: The text of all pages, separated by form feeds.
    """
    if not content:
        raise ValueError("Empty document")
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        text = _pages_to_text(pdf)
    logger.debug("Extracted %d characters from uploaded PDF", len(text))
    return text


def extract_text(path_or_url: str) -> str:
    """
    Extracts text from a local or remote PDF, or reads a plain-text syllabus.
    Simple and blocking.
    :param path_or_url: A local file path or a URL.
    :return: The text contents of the document.
    """
    doc_path = _load_document_path(path_or_url)
    if Path(doc_path).suffix.lower() in TEXT_SUFFIXES:
        return Path(doc_path).read_text(encoding="utf-8", errors="replace")
    with pdfplumber.open(doc_path) as pdf:
        text = _pages_to_text(pdf)
    logger.debug("Extracted %d characters from %s", len(text), path_or_url)
    return text
