"""Canned catalog payloads shaped like the live APIs."""

from __future__ import annotations

from typing import Any


def civitai_model_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": 4201,
        "name": "Realistic Vision",
        "description": "<p>Photo <b>realistic</b> checkpoint</p>",
        "type": "Checkpoint",
        "poi": False,
        "nsfw": False,
        "allowNoCredit": False,
        "allowCommercialUse": ["Image", "Sell"],
        "allowDerivatives": True,
        "allowDifferentLicense": False,
        "stats": {"downloadCount": 10, "rating": 4.9},
        "creator": {"username": "SG_161222"},
        "tags": ["photorealistic", "base model"],
        "modelVersions": [
            {
                "id": 130072,
                "modelId": 4201,
                "name": "V6.0",
                "baseModel": "SD 1.5",
                "createdAt": "2023-07-01T00:00:00Z",
                "downloadUrl": "https://civitai.com/api/download/models/130072",
                "files": [
                    {
                        "id": 1,
                        "name": "vae.pt",
                        "sizeKB": 320,
                        "primary": False,
                        "downloadUrl": "https://civitai.com/api/download/models/130072?type=VAE",
                    },
                    {
                        "id": 2,
                        "name": "realisticVision_v60.safetensors",
                        "sizeKB": 2097152,
                        "primary": True,
                        "pickleScanResult": "Success",
                        "virusScanResult": "Success",
                        "hashes": {"SHA256": "ABC123"},
                        "downloadUrl": "https://civitai.com/api/download/models/130072",
                    },
                ],
                "images": [
                    {"url": "https://image.civitai.com/nsfw.jpg", "nsfw": "X"},
                    {"url": "https://image.civitai.com/sfw.jpg", "nsfw": "None"},
                ],
            },
            {
                "id": 100000,
                "modelId": 4201,
                "name": "V5.1",
                "baseModel": "SD 1.5",
                "files": [{"id": 3, "name": "rv51.safetensors", "sizeKB": 1024, "downloadUrl": "https://civitai.com/api/download/models/100000"}],
                "images": [],
            },
        ],
    }
    payload.update(overrides)
    return payload


def huggingface_model_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "_id": "abc",
        "id": "stabilityai/stable-diffusion-xl-base-1.0",
        "modelId": "stabilityai/stable-diffusion-xl-base-1.0",
        "author": "stabilityai",
        "sha": "462165984030d82259a11f4367a4eed129e94a7b",
        "lastModified": "2023-10-30T16:03:47.000Z",
        "private": False,
        "disabled": False,
        "gated": False,
        "downloads": 2000000,
        "likes": 6000,
        "library_name": "diffusers",
        "pipeline_tag": "text-to-image",
        "tags": ["diffusers", "safetensors", "stable-diffusion-xl", "text-to-image"],
        "cardData": {"license": "openrail++"},
        "siblings": [
            {"rfilename": "README.md"},
            {"rfilename": "model_index.json"},
            {"rfilename": "unet/diffusion_pytorch_model.safetensors", "size": 10},
            {
                "rfilename": "sd_xl_base_1.0.safetensors",
                "lfs": {"size": 6938078334, "sha256": "31e35c80fc4829d14f90153f4c74cd59c90b779f6afe05a74cd6120b893f7e5b"},
            },
        ],
    }
    payload.update(overrides)
    return payload


def registry_node_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "comfyui-impact-pack",
        "name": "ComfyUI Impact Pack",
        "category": "Segmentation",
        "description": "Detectors, detailers and upscalers.",
        "repository": "https://github.com/ltdrdata/ComfyUI-Impact-Pack",
        "tags": ["detailer", "sam"],
        "publisher": {"id": "drltdata", "name": "Dr.Lt.Data"},
        "status": "NodeStatusActive",
        "downloads": 120000,
        "latest_version": {"id": "v-1", "version": "8.1.0"},
    }
    payload.update(overrides)
    return payload
