"""Loading images and icons as PNG data, trimming borders, dominant colours."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import urljoin, urlsplit

import numpy as np
import requests
from bs4 import BeautifulSoup
from PIL import Image

logger = logging.getLogger(__name__)

_HTTP_TIMEOUT = 30.0
_PROGRAM_SUFFIXES = (".lnk", ".exe", ".url")
_ICON_SELECTOR = 'link[rel="icon"], link[rel="shortcut icon"]'

_FNV_OFFSET_BASIS = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_U64_MASK = 0xFFFFFFFFFFFFFFFF

_CLUSTER_COUNT = 5
_MAX_ITERATIONS = 20
_TOLERANCE = 1.0
_RUNS = 3

# sRGB (D65) <-> CIE XYZ conversion.
_RGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)
_XYZ_TO_RGB = np.linalg.inv(_RGB_TO_XYZ)
_WHITE_D65 = np.array([0.95047, 1.0, 1.08883])
_LAB_EPSILON = 216.0 / 24389.0
_LAB_KAPPA = 24389.0 / 27.0


class ImageKind(Enum):
    """How an image is obtained."""

    FILE = "file"
    WEB = "web"


@dataclass(frozen=True)
class ImageIdentity:
    """Identifies an image: a file path or the URL of a web page."""

    kind: ImageKind
    text: str

    def hash_key(self) -> str:
        """Return a stable decimal FNV-1a hash of the identifying text."""
        value = _FNV_OFFSET_BASIS
        for byte in self.text.encode("utf-8") + b"\xff":
            value = ((value ^ byte) * _FNV_PRIME) & _U64_MASK
        return str(value)


def load_image(identity: ImageIdentity) -> bytes:
    """Return PNG data for ``identity``, or empty bytes if none can be obtained."""
    if identity.kind is ImageKind.WEB:
        return _load_web_icon(identity.text)
    return _load_image_from_path(identity.text)


def _load_web_icon(url: str) -> bytes:
    try:
        return convert_image_to_png(fetch_website_favicon(url))
    except (requests.RequestException, ValueError) as exc:
        logger.warning("could not load icon of %s: %s", url, exc)
        return b""


def _load_image_from_path(path: str) -> bytes:
    if is_program(path):
        logger.debug("no icon extraction available for program file %s", path)
        return b""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        logger.warning("could not read image %s: %s", path, exc)
        return b""
    try:
        return convert_image_to_png(data)
    except ValueError as exc:
        logger.warning("could not decode image %s: %s", path, exc)
        return b""


def _open_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, SyntaxError) as exc:
        raise ValueError(f"cannot decode image: {exc}") from exc
    return image


def _encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def convert_image_to_png(data: bytes) -> bytes:
    """Decode image data of any supported format and encode it as PNG."""
    image = _open_image(bytes(data))
    if image.format != "PNG":
        image = image.convert("RGBA")
    return _encode_png(image)


def fetch_website_favicon(url: str) -> bytes:
    """Download the icon that the web page at ``url`` declares.

    Falls back to ``/favicon.ico`` on the page's host when none is declared.
    """
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"invalid base URL: {url!r}")
    page = requests.get(url, timeout=_HTTP_TIMEOUT)
    soup = BeautifulSoup(page.text, "html.parser")
    tag = soup.select_one(_ICON_SELECTOR)
    href = tag.get("href") if tag is not None else None
    if isinstance(href, list):
        href = " ".join(href)
    icon_url = urljoin(url, href) if href is not None else urljoin(url, "/favicon.ico")
    icon = requests.get(icon_url, timeout=_HTTP_TIMEOUT)
    return icon.content


def is_program(path: str) -> bool:
    """Tell whether ``path`` names a program or shortcut rather than a picture."""
    return path.endswith(_PROGRAM_SUFFIXES)


def is_white_or_transparent(pixel: tuple[int, int, int, int]) -> bool:
    """Tell whether an RGBA pixel is almost transparent or almost white."""
    red, green, blue, alpha = pixel
    return alpha < 10 or (red > 245 and green > 245 and blue > 245)


def trim_transparent_white_border(png_data: bytes) -> bytes:
    """Crop the white or transparent frame around a square image.

    Returns the input unchanged when the whole image is white or transparent.
    """
    data = bytes(png_data)
    image = _open_image(data)
    width, height = image.size
    if width != height:
        raise ValueError("image is not square")
    size = width
    pixels = np.asarray(image.convert("RGBA"), dtype=np.int32)
    blank = (pixels[..., 3] < 10) | np.all(pixels[..., :3] > 245, axis=-1)

    border = 0
    for layer in range(size // 2):
        end = size - layer
        ring = (
            blank[layer, layer:end],
            blank[layer:end, size - 1 - layer],
            blank[size - 1 - layer, layer:end],
            blank[layer:end, layer],
        )
        if not all(side.all() for side in ring):
            break
        border = layer + 1

    if border >= size // 2:
        return data

    cropped = pixels[border : size - border, border : size - border].astype(np.uint8)
    return _encode_png(Image.fromarray(cropped, mode="RGBA"))


def _srgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    c = rgb.astype(np.float64) / 255.0
    linear = np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)
    xyz = (linear @ _RGB_TO_XYZ.T) / _WHITE_D65
    f = np.where(xyz > _LAB_EPSILON, np.cbrt(xyz), (_LAB_KAPPA * xyz + 16.0) / 116.0)
    lightness = 116.0 * f[:, 1] - 16.0
    a = 500.0 * (f[:, 0] - f[:, 1])
    b = 200.0 * (f[:, 1] - f[:, 2])
    return np.stack([lightness, a, b], axis=1)


def _lab_to_srgb(lab: np.ndarray) -> tuple[int, int, int]:
    lightness, a, b = (float(v) for v in lab)
    fy = (lightness + 16.0) / 116.0
    fx = fy + a / 500.0
    fz = fy - b / 200.0
    x = fx**3 if fx**3 > _LAB_EPSILON else (116.0 * fx - 16.0) / _LAB_KAPPA
    y = fy**3 if lightness > _LAB_KAPPA * _LAB_EPSILON else lightness / _LAB_KAPPA
    z = fz**3 if fz**3 > _LAB_EPSILON else (116.0 * fz - 16.0) / _LAB_KAPPA
    linear = np.clip((np.array([x, y, z]) * _WHITE_D65) @ _XYZ_TO_RGB.T, 0.0, None)
    c = np.where(
        linear <= 0.0031308, 12.92 * linear, 1.055 * linear ** (1.0 / 2.4) - 0.055
    )
    red, green, blue = np.rint(np.clip(c, 0.0, 1.0) * 255.0).astype(int)
    return int(red), int(green), int(blue)


def _squared_distances(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    return np.stack(
        [((samples - centroid) ** 2).sum(axis=1) for centroid in centroids], axis=1
    )


def _initial_centroids(
    samples: np.ndarray, count: int, rng: np.random.Generator
) -> np.ndarray:
    chosen = [samples[rng.integers(len(samples))]]
    while len(chosen) < count:
        nearest = _squared_distances(samples, np.array(chosen)).min(axis=1)
        total = nearest.sum()
        if total > 0:
            index = rng.choice(len(samples), p=nearest / total)
        else:
            index = rng.integers(len(samples))
        chosen.append(samples[index])
    return np.array(chosen)


def _kmeans(
    samples: np.ndarray, count: int, rng: np.random.Generator
) -> tuple[float, np.ndarray, np.ndarray]:
    centroids = _initial_centroids(samples, count, rng)
    for _ in range(_MAX_ITERATIONS):
        labels = _squared_distances(samples, centroids).argmin(axis=1)
        sums = np.zeros_like(centroids)
        np.add.at(sums, labels, samples)
        members = np.bincount(labels, minlength=count)[:, None]
        updated = np.where(members > 0, sums / np.maximum(members, 1), centroids)
        shift = np.sqrt(((updated - centroids) ** 2).sum(axis=1)).max()
        centroids = updated
        if shift <= _TOLERANCE:
            break
    distances = _squared_distances(samples, centroids)
    labels = distances.argmin(axis=1)
    score = float(distances.min(axis=1).sum())
    return score, centroids, labels


def get_dominant_color(image_data: bytes) -> tuple[int, int, int]:
    """Return the RGB colour of the largest colour cluster among visible pixels."""
    image = _open_image(bytes(image_data))
    rgba = np.asarray(image.convert("RGBA")).reshape(-1, 4)
    visible = rgba[rgba[:, 3] != 0][:, :3]
    if visible.size == 0:
        raise ValueError("No visible pixels in image")

    samples = _srgb_to_lab(visible)
    rng = np.random.default_rng()
    runs = [_kmeans(samples, _CLUSTER_COUNT, rng) for _ in range(_RUNS)]
    _, centroids, labels = min(runs, key=lambda run: run[0])

    counts = np.bincount(labels, minlength=_CLUSTER_COUNT)
    # On ties the last of the largest clusters wins.
    dominant = len(counts) - 1 - int(np.argmax(counts[::-1]))
    return _lab_to_srgb(centroids[dominant])