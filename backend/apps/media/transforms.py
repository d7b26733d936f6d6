from typing import List

from .dtos import TransformLink

# key -> (label, Cloudinary transformation)
IMAGE_TRANSFORMS = {
    "desktopSlider": ("Desktop Slider", "w_1920,ar_16:9,c_pad,b_black,e_upscale,q_auto,f_auto"),
    "mobileSlider": ("Mobile Slider", "w_800,h_1080,e_upscale,q_auto,f_auto"),
    "sliderThumbnail": ("Slider Thumbnail", "w_200,h_200,c_fill,e_upscale,q_auto,f_auto"),
    "productImage": ("Product Image", "w_1080,h_1080,c_fill,e_upscale,q_auto,f_auto"),
    "cloudinaryDefault": ("Cloudinary Default", ""),
}


def apply_transform(url: str, params: str) -> str:
    if not params:
        return url
    return url.replace("/upload/", f"/upload/{params}/", 1)


def transform_links(url: str) -> List[TransformLink]:
    return [
        TransformLink(key=key, label=label, url=apply_transform(url, params))
        for key, (label, params) in IMAGE_TRANSFORMS.items()
    ]


def thumbnail_url(url: str, size: int = 100) -> str:
    if "cloudinary" not in (url or ""):
        return url
    return apply_transform(url, f"w_{size},h_{size},c_fill")
