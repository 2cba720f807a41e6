"""
physics/trim.py - Equilibrium draft and trim

Finds the mean draft that floats a target displacement (Newton-Raphson on
draft with a finite-difference slope), then trims the vessel by the
moment between LCG and LCB using MCT.
"""

from __future__ import annotations
from typing import List, Optional
import logging
import math

from hydrostab.errors import InvalidArgumentError
from hydrostab.geometry.models import HullGeometry, Loadcase
from hydrostab.physics.hydrostatics import HydrostaticsCalculator
from hydrostab.physics.results import HydroResult, TrimSolution

logger = logging.getLogger(__name__)

# Finite-difference step for d(displacement)/d(draft) (m)
DRAFT_PERTURBATION_M = 0.01

# Default convergence tolerance on displacement (t)
DEFAULT_TOLERANCE_T = 0.1


class TrimSolver:
    """Newton-Raphson equilibrium solver on top of the hydrostatics calculator."""

    def __init__(self, calculator: Optional[HydrostaticsCalculator] = None):
        self.calculator = calculator or HydrostaticsCalculator()

    def solve_for_displacement(
        self,
        geometry: HullGeometry,
        target_displacement_t: float,
        loadcase: Optional[Loadcase] = None,
        initial_draft: Optional[float] = None,
        max_iterations: int = 20,
        tolerance_t: float = DEFAULT_TOLERANCE_T,
    ) -> TrimSolution:
        """
        Solve for the floating condition carrying a displacement.

        Args:
            geometry: Complete hull geometry
            target_displacement_t: Displacement to float (tonnes)
            loadcase: Density, and LCG for trim; level trim without LCG
            initial_draft: Starting mean draft (m); design draft by default
            max_iterations: Newton iteration limit
            tolerance_t: Convergence tolerance on displacement (tonnes)

        Returns:
            TrimSolution; converged is False when the iteration limit is hit
        """
        if target_displacement_t is None or not target_displacement_t > 0:
            raise InvalidArgumentError(
                f"Target displacement must be positive, got {target_displacement_t}",
                param="target_displacement",
            )
        if max_iterations < 1:
            raise InvalidArgumentError("max_iterations must be >= 1", param="max_iterations")

        loadcase = loadcase or Loadcase()
        grid = geometry.grid
        z_max = grid.z_max
        draft = initial_draft if initial_draft is not None else self._reference_draft(geometry)
        if not draft > 0:
            raise InvalidArgumentError(f"Initial draft must be positive, got {draft}", param="initial_draft")
        draft = min(draft, z_max)

        warnings: List[str] = []
        converged = False
        iteration = 0
        result = self.calculator.compute_at_draft(geometry, draft, loadcase)
        error = result.displacement_t - target_displacement_t

        while iteration < max_iterations:
            iteration += 1
            logger.debug(
                f"Iteration {iteration}: T={draft:.4f} m, disp={result.displacement_t:.3f} t, error={error:.3f} t"
            )
            if abs(error) < tolerance_t:
                converged = True
                break

            slope = self._slope(geometry, draft, loadcase, result)
            if slope <= 0:
                warnings.append(f"Displacement does not increase with draft at {draft:.3f} m")
                break

            draft = min(max(draft - error / slope, z_max * 1e-6), z_max)
            result = self.calculator.compute_at_draft(geometry, draft, loadcase)
            error = result.displacement_t - target_displacement_t

        if not converged and abs(error) < tolerance_t:
            converged = True
        if not converged:
            logger.warning(
                f"Trim solver did not converge after {iteration} iterations (error {error:.3f} t)"
            )
            warnings.append(f"Not converged: residual {error:.3f} t")

        return self._trimmed_solution(
            geometry, result, loadcase, target_displacement_t, converged, iteration, warnings
        )

    def is_displacement_achievable(
        self,
        geometry: HullGeometry,
        target_displacement_t: float,
        loadcase: Optional[Loadcase] = None,
    ) -> bool:
        """True when the hull floats the target at or below its design draft."""
        result = self.calculator.compute_at_draft(geometry, self._reference_draft(geometry), loadcase)
        return 0 < target_displacement_t <= result.displacement_t

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _reference_draft(geometry: HullGeometry) -> float:
        if geometry.design_draft is not None:
            return geometry.design_draft
        return geometry.grid.z_max

    def _slope(self, geometry: HullGeometry, draft: float, loadcase: Loadcase, result: HydroResult) -> float:
        """d(displacement)/d(draft) in t/m by finite difference, falling back to TPC."""
        z_max = geometry.grid.z_max
        step = DRAFT_PERTURBATION_M if draft + DRAFT_PERTURBATION_M <= z_max else -DRAFT_PERTURBATION_M
        if draft + step < 0:
            return result.tpc * 100.0
        perturbed = self.calculator.compute_at_draft(geometry, draft + step, loadcase)
        slope = (perturbed.displacement_t - result.displacement_t) / step
        if abs(slope) < 1e-9:
            return result.tpc * 100.0
        return slope

    def _trimmed_solution(
        self,
        geometry: HullGeometry,
        result: HydroResult,
        loadcase: Loadcase,
        target: float,
        converged: bool,
        iterations: int,
        warnings: List[str],
    ) -> TrimSolution:
        grid = geometry.grid
        x_ap, x_fp = grid.xs[0], grid.xs[-1]
        span = x_fp - x_ap

        trim_m = 0.0
        if loadcase.lcg is not None and result.mct > 0:
            trim_m = result.displacement_t * (result.lcb - loadcase.lcg) / result.mct / 100.0

        draft_ap = result.draft + trim_m * (result.lcf - x_ap) / span
        draft_fp = result.draft - trim_m * (x_fp - result.lcf) / span
        if draft_fp < 0 or draft_ap < 0:
            warnings.append("Trimmed draft at a perpendicular is negative")

        return TrimSolution(
            target_displacement_t=target,
            mean_draft=0.5 * (draft_ap + draft_fp),
            draft_ap=draft_ap,
            draft_fp=draft_fp,
            trim_m=trim_m,
            trim_deg=math.degrees(math.atan2(trim_m, span)),
            lcf=result.lcf,
            mct=result.mct,
            displacement_t=result.displacement_t,
            converged=converged,
            iterations=iterations,
            warnings=warnings,
        )
