"""
Explicit selection state for the three-tier hierarchy.

Selections are immutable values owned by the caller. Changing a tier
clears the tiers below it; locating a department or arrondissement directly (a click on
a voting center or on the map) resolves the tiers above it.
"""

from dataclasses import dataclass, replace
from typing import Optional

from loguru import logger

from .spatial_index import HierarchyIndex


@dataclass(frozen=True)
class Selection:
    """Currently selected region, department and arrondissement names."""

    region: Optional[str] = None
    department: Optional[str] = None
    arrondissement: Optional[str] = None

    def with_region(self, region: Optional[str]) -> "Selection":
        """Select a region; department and arrondissement are cleared."""
        return Selection(region=region)

    def with_department(self, department: Optional[str]) -> "Selection":
        """Select a department; arrondissement is cleared."""
        return replace(self, department=department, arrondissement=None)

    def with_arrondissement(self, arrondissement: Optional[str]) -> "Selection":
        return replace(self, arrondissement=arrondissement)

    @property
    def level(self) -> Optional[str]:
        """Deepest selected tier, or None when nothing is selected."""
        if self.arrondissement:
            return "arrondissement"
        if self.department:
            return "department"
        if self.region:
            return "region"
        return None

    def locate_department(self, department: str, hierarchy: HierarchyIndex) -> "Selection":
        """
        Select a department and resolve its region through the boundary index.

        The arrondissement is cleared. When no region contains the department
        the current region is kept.
        """
        region = hierarchy.region_of_department(department)
        if region is None:
            logger.warning(f"⚠️ No region found for department \"{department}\"")
            region = self.region
        return Selection(region=region, department=department)

    def locate_arrondissement(self, arrondissement: str, hierarchy: HierarchyIndex) -> "Selection":
        """
        Select an arrondissement and resolve its department and region.

        Parents that cannot be resolved keep their current value; the
        arrondissement is selected either way.
        """
        region, department = hierarchy.lineage_of_arrondissement(arrondissement)
        if department is None:
            logger.warning(f"⚠️ No department found for arrondissement \"{arrondissement}\"")
            return replace(self, arrondissement=arrondissement)
        if region is None:
            logger.warning(f"⚠️ No region found for department \"{department}\"")
            region = self.region
        return Selection(region=region, department=department, arrondissement=arrondissement)

    @classmethod
    def from_department(cls, department: str, hierarchy: HierarchyIndex) -> "Selection":
        """Build a selection from a department name alone (region looked up)."""
        return cls().locate_department(department, hierarchy)

    @classmethod
    def from_arrondissement(cls, arrondissement: str, hierarchy: HierarchyIndex) -> "Selection":
        """
        Build a consistent selection from an arrondissement name alone.

        Department and region are looked up through the boundary index. Parents
        that cannot be resolved stay None; the arrondissement is kept either way.
        """
        return cls().locate_arrondissement(arrondissement, hierarchy)
