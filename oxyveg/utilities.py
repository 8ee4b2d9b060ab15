import numpy as np
import xarray as xr

# Present-day atmospheric O2 (%), the normalisation baseline of every oxygen sweep
REFERENCE_O2 = 20.95

# Oxygen sweep of the main simulations (%)
DEFAULT_OXYGEN = (16, 17, 18, 19, 20, 20.95, 22, 23, 24, 25, 26, 27, 28, 30, 31, 32, 33, 34, 35)

# Oxygen sweep of the parameter sensitivity runs (%)
SENSITIVITY_OXYGEN = (20.95, 23, 25, 27, 29, 31, 33, 35)

EARTH_RADIUS_KM = 6371.0

# ========================================================================================================================
# Function format_oxygen
# ========================================================================================================================

def format_oxygen(oxygen):
    """
    Render an oxygen level the way it appears in LPJ-LMfire output filenames.

    Examples
    --------
    format_oxygen(16)     # '16'
    format_oxygen(20.95)  # '20.95'
    format_oxygen(25.0)   # '25'
    """
    return np.format_float_positional(float(oxygen), trim='-')

# ========================================================================================================================
# Function calc_APAR
# ========================================================================================================================

def calc_APAR(par: float, fpar: float, alphaa: float = 0.5) -> float:
    """
    Absorbed photosynthetically active radiation.

    Parameters
    ----------
    par : float
        Net PAR (J m⁻² day⁻¹).
    fpar : float
        Fraction of PAR intercepted by the canopy (0–1).
    alphaa : float, optional
        Scaling from leaf to ecosystem level. Default 0.5.

    Returns
    -------
    float
        APAR (J m⁻² day⁻¹)
    """
    return par * fpar * alphaa

# ========================================================================================================================
# Function calc_grid_cell_area
# ========================================================================================================================

def _resolution(coord):
    coord = np.asarray(coord, dtype=float)
    if coord.size < 2:
        raise ValueError("At least two coordinate values are needed to infer the grid resolution")
    return float(np.median(np.abs(np.diff(coord))))


def calc_grid_cell_area(lat, lon, radius=EARTH_RADIUS_KM):
    """
    Surface area of each cell of a regular latitude/longitude grid.

    Parameters
    ----------
    lat : array-like
        Cell-centre latitudes (degrees north).
    lon : array-like
        Cell-centre longitudes (degrees east).
    radius : float, optional
        Earth radius (km). Default 6371.0.

    Returns
    -------
    xr.DataArray
        Cell area (m²) with dims (lat, lon).

    Notes
    -----
    - Cell edges are half a grid spacing either side of the centre, clipped at the poles.
    - Spacing is the median absolute coordinate difference, so grids with land-only
      gaps in the coordinates still get the right cell size.

    Example
    -------
    area = calc_grid_cell_area(np.arange(-89.75, 90, 0.5), np.arange(-179.75, 180, 0.5))
    print(area.sum().item() / 1e6)  # ~5.1e8 km²
    """
    lat = np.asarray(lat, dtype=float)
    lon = np.asarray(lon, dtype=float)
    dlat = _resolution(lat)
    dlon = _resolution(lon)

    north = np.radians(np.clip(lat + dlat / 2.0, -90.0, 90.0))
    south = np.radians(np.clip(lat - dlat / 2.0, -90.0, 90.0))
    band = np.abs(np.sin(north) - np.sin(south))

    radius_m = radius * 1e3
    area = radius_m ** 2 * np.radians(dlon) * band
    area = np.broadcast_to(area[:, np.newaxis], (lat.size, lon.size))
    return xr.DataArray(area.copy(), dims=('lat', 'lon'), coords={'lat': lat, 'lon': lon}, name='area',
                        attrs={'units': 'm2'})
