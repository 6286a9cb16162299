# backend/utils/seo.py
from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, Optional

from flask import current_app, has_app_context

_DEFAULT_SITE_NAME = "Nguza"
_DEFAULT_SITE_URL = "https://nguza.example.com"


def _site() -> tuple[str, str]:
    if has_app_context():
        return (
            current_app.config.get("SITE_NAME", _DEFAULT_SITE_NAME),
            current_app.config.get("SITE_URL", _DEFAULT_SITE_URL).rstrip("/"),
        )
    return _DEFAULT_SITE_NAME, _DEFAULT_SITE_URL


def slugify(text: Any) -> str:
    if not text:
        return ""
    s = unicodedata.normalize("NFKD", str(text)).encode("ascii", "ignore").decode("ascii")
    s = re.sub(r"[^a-z0-9\s-]", "", s.lower()).strip()
    s = re.sub(r"\s+", "-", s)
    return re.sub(r"-+", "-", s)


def _short(s: str, n: int) -> str:
    return s[:n] if s else ""


def _crops(sub_category, details, district, name, site_name, site_url):
    crop = details.get("cropType") or sub_category or name or "Produce"
    variety = f" {details['variety']}" if details.get("variety") else ""
    qty = ""
    if details.get("quantity"):
        qty = f"Available: {details['quantity']} {details.get('unit') or ''}. "
    organic = "Organic produce. " if details.get("organic") else ""
    keywords = [f"{crop} for sale", f"{crop} in {district}", f"{sub_category}"]
    if details.get("variety"):
        keywords.append(details["variety"])
    if details.get("organic"):
        keywords.append("organic")
    keywords += ["agriculture", "produce for sale", district]
    slug = slugify(f"{crop} {variety} {district}")
    return {
        "title": _short(f"{crop}{variety} for sale in {district} | {site_name}", 70),
        "description": _short(f"Buy {crop}{variety} in {district}. {qty}{organic}Find trusted sellers on {site_name}.", 160),
        "keywords": keywords,
        "canonical": f"{site_url}/crops/{slug}",
        "slug": slug,
    }


def _livestock(sub_category, details, district, name, site_name, site_url):
    animal = details.get("animalType") or sub_category or name or "Livestock"
    breed = f" {details['breed']}" if details.get("breed") else ""
    qty = f"Quantity: {details['quantity']}. " if details.get("quantity") else ""
    health = f"{details['healthStatus']}. " if details.get("healthStatus") else ""
    keywords = [f"{animal} for sale", f"{animal} in {district}"]
    if details.get("breed"):
        keywords.append(details["breed"])
    keywords += ["livestock", district]
    slug = slugify(f"{animal} {breed} {district}")
    return {
        "title": _short(f"{animal}{breed} for sale in {district} | {site_name}", 70),
        "description": _short(f"Find {animal}{breed} in {district}. {qty}{health}Trusted sellers on {site_name}.", 160),
        "keywords": keywords,
        "canonical": f"{site_url}/livestock/{slug}",
        "slug": slug,
    }


def _inputs(sub_category, details, district, name, site_name, site_url):
    product = details.get("productName") or sub_category or name or "Input"
    brand = f"Brand: {details['brand']}. " if details.get("brand") else ""
    qty = ""
    if details.get("quantity"):
        qty = f"Quantity: {details['quantity']} {details.get('unit') or ''}. "
    slug = slugify(f"{product} {district}")
    return {
        "title": _short(f"{product} available in {district} | {site_name}", 70),
        "description": _short(f"Buy {product} in {district}. {brand}{qty}Get certified inputs on {site_name}.", 160),
        "keywords": [product.lower(), f"{product} {district}", "fertilizer", "seeds", "agricultural inputs", district],
        "canonical": f"{site_url}/inputs/{slug}",
        "slug": slug,
    }


def _equipment(sub_category, details, district, name, site_name, site_url):
    equipment = details.get("equipmentType") or sub_category or name or "Equipment"
    brand = f"Brand: {details['brand']}. " if details.get("brand") else ""
    condition = f"{details['condition']}. " if details.get("condition") else ""
    slug = slugify(f"{equipment} {district}")
    return {
        "title": _short(f"{equipment} for sale in {district} | {site_name}", 70),
        "description": _short(f"Buy {equipment} in {district}. {brand}{condition}Find reliable equipment on {site_name}.", 160),
        "keywords": [equipment.lower(), f"{equipment} {district}", "agricultural equipment", district],
        "canonical": f"{site_url}/equipment/{slug}",
        "slug": slug,
    }


def _services(sub_category, details, district, name, site_name, site_url):
    service = details.get("serviceType") or sub_category or name or "Service"
    model = f"Price model: {details['priceModel']}. " if details.get("priceModel") else ""
    exp = f"Experience: {details['experience']}. " if details.get("experience") else ""
    slug = slugify(f"{service} {district}")
    return {
        "title": _short(f"{service} in {district} | {site_name}", 70),
        "description": _short(f"{service} available in {district}. {model}{exp}Find trusted service providers on {site_name}.", 160),
        "keywords": [service.lower(), f"{service} {district}", "agricultural services", district],
        "canonical": f"{site_url}/services/{slug}",
        "slug": slug,
    }


_BUILDERS = {
    "Crops": _crops,
    "Livestock": _livestock,
    "Agricultural Inputs": _inputs,
    "Equipment & Tools": _equipment,
    "Agricultural Services": _services,
}


def generate_seo(category: Optional[str], sub_category: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 location: Optional[Dict[str, Any]] = None,
                 name: str = "") -> Dict[str, Any]:
    """Title/description/keywords/canonical/slug for a listing page."""
    site_name, site_url = _site()
    details = details or {}
    district = (location or {}).get("district") or "Uganda"

    if not category:
        return {
            "title": f"{site_name} - Agriculture Marketplace",
            "description": f"Buy and sell crops, livestock, inputs, equipment and services across Uganda on {site_name}.",
            "keywords": ["agriculture", "crops", "livestock", "agricultural inputs", "equipment"],
            "canonical": f"{site_url}/listings",
            "slug": "listings",
        }

    builder = _BUILDERS.get(category)
    if builder is not None:
        return builder(sub_category, details, district, name, site_name, site_url)

    label = sub_category or category
    return {
        "title": f"{label} | {site_name}",
        "description": f"Find {label} across Uganda on {site_name}.",
        "keywords": [category.lower(), "agriculture", "Uganda"],
        "canonical": f"{site_url}/{slugify(category)}/{slugify(sub_category or '')}",
        "slug": slugify(f"{category} {sub_category or ''}"),
    }
