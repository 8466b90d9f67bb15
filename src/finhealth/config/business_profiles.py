"""
Business type profiles used to estimate figures a listing does not report.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field


@dataclass
class BusinessProfile:
    """Estimation profile for a family of business types."""
    name: str
    gross_margin: float
    keywords: List[str] = field(default_factory=list)


class BusinessProfileMapper:
    """Business type to estimation profile mapping."""

    DEFAULT_PROFILE = "general"

    def __init__(self):
        self.profiles = self._initialize_profiles()
        self.name_to_profile = {profile.name: profile for profile in self.profiles}

    def _initialize_profiles(self) -> List[BusinessProfile]:
        """Initialize predefined profiles. Gross margins follow industry averages."""
        return [
            BusinessProfile("technology", 0.60, ["software", "saas", "technology", "tech"]),
            BusinessProfile("services", 0.40, ["service", "consulting", "agency", "cleaning"]),
            BusinessProfile("healthcare", 0.35, ["health", "medical", "dental", "clinic"]),
            BusinessProfile("ecommerce", 0.35, ["ecommerce", "e-commerce", "online store"]),
            BusinessProfile("restaurant", 0.25, ["restaurant", "cafe", "bakery", "food"]),
            BusinessProfile("manufacturing", 0.25, ["manufactur", "factory", "fabrication"]),
            BusinessProfile("retail", 0.30, ["retail", "shop", "store"]),
            BusinessProfile(self.DEFAULT_PROFILE, 0.30),
        ]

    def get_profile(self, business_type: Optional[str]) -> BusinessProfile:
        """Get the first profile whose keywords match the business type."""
        if business_type:
            business_type_lower = str(business_type).lower()
            for profile in self.profiles:
                if any(keyword in business_type_lower for keyword in profile.keywords):
                    return profile
        return self.name_to_profile[self.DEFAULT_PROFILE]

    def get_gross_margin(self, business_type: Optional[str]) -> float:
        """Get the estimated gross margin for a business type."""
        return self.get_profile(business_type).gross_margin

    def list_profiles(self) -> Dict[str, float]:
        """Get profile names with their gross margin estimates."""
        return {profile.name: profile.gross_margin for profile in self.profiles}
