from enum import Enum

import numpy as np
import xarray as xr

from oxyveg.utilities import calc_grid_cell_area

# Fractional tree cover from which a grid cell counts as forest
FOREST_THRESHOLD = 0.6


class AggregationMode(Enum):
    SUM_BIOMASS = 'biomass'
    FOREST_AREA = 'forest'
    FIRE_COUNT = 'count'

# ========================================================================================================================
# Function binarise_forest
# ========================================================================================================================

def binarise_forest(grid):
    """Cells with cover >= 0.6 become 1, the rest 0. Missing cells stay missing."""
    forest = xr.where(grid >= FOREST_THRESHOLD, 1.0, 0.0)
    return forest.where(grid.notnull())

# ========================================================================================================================
# Function global_total
# ========================================================================================================================

def global_total(grid, mode=AggregationMode.SUM_BIOMASS):
    """
    Reduce a decadal average grid to one global number.

    Parameters
    ----------
    grid : xr.DataArray
        Field with dims (lat, lon).
    mode : AggregationMode
        - SUM_BIOMASS : area-weighted integral Σ value × cell area, in Pg
          (grid in g m⁻² -> PgC)
        - FOREST_AREA : area of forest cells after binarising at 0.6, in km²
        - FIRE_COUNT : sum of per-cell fire counts

    Returns
    -------
    float

    Example
    -------
    total = global_total(grid, AggregationMode.FOREST_AREA)
    """
    mode = AggregationMode(mode)
    if 'lat' not in grid.dims or 'lon' not in grid.dims:
        raise ValueError(f"Grid needs 'lat' and 'lon' dimensions, got {grid.dims}")

    if mode is AggregationMode.FIRE_COUNT:
        return float(np.nansum(grid.values))

    area = calc_grid_cell_area(grid['lat'].values, grid['lon'].values)
    area = area.assign_coords(lat=grid['lat'], lon=grid['lon'])

    if mode is AggregationMode.FOREST_AREA:
        forest = binarise_forest(grid)
        return float(np.nansum((forest * area).values)) / 1e6  # m² -> km²

    return float(np.nansum((grid * area).values)) / 1e15  # g -> Pg
