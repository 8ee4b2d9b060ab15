import numpy as np
import xarray as xr

# Coordinate spellings found in LPJ-LMfire and observational products
_COORD_ALIASES = {'longitude': 'lon', 'latitude': 'lat', 'x': 'lon', 'y': 'lat'}

# ========================================================================================================================
# Function decadal_average
# ========================================================================================================================

def _standardise_coords(da):
    rename = {k: v for k, v in _COORD_ALIASES.items() if k in da.dims and v not in da.dims}
    return da.rename(rename) if rename else da


def decadal_average(filepath, varname, npft=None, n_years=10):
    """
    Average the last decade of an LPJ-LMfire output variable.

    Parameters
    ----------
    filepath : str or Path
        Absolute path to the netCDF output file.
    varname : str
        Variable to read, e.g. 'pftalbiomass', 'forestcov', 'NPP', 'mnfire'.
    npft : int, optional
        1-based plant functional type to select. If None, a 'pft' dimension is summed.
    n_years : int, optional
        Number of trailing time steps to average. Default 10.

    Returns
    -------
    xr.DataArray
        Grid with dims (lat, lon); the averaged period is kept in `attrs['decade']`.

    Raises
    ------
    FileNotFoundError, OSError, ValueError
        From xarray when the file is missing or unreadable.
    KeyError
        If the variable is not in the file.
    """
    with xr.open_dataset(filepath) as ds:
        if varname not in ds.data_vars:
            raise KeyError(f"Variable '{varname}' not found in {filepath}")
        da = _standardise_coords(ds[varname])

        if 'pft' in da.dims:
            if npft is not None:
                da = da.isel(pft=npft - 1)
            else:
                da = da.sum('pft', skipna=True, min_count=1)

        decade = ''
        if 'time' in da.dims:
            da = da.isel(time=slice(-n_years, None))
            times = da['time'].values
            decade = f'{times[0]}/{times[-1]}'
            da = da.mean('time', skipna=True)

        extra = set(da.dims) - {'lat', 'lon'}
        if extra:
            raise ValueError(f"Cannot reduce '{varname}' to a spatial grid, leftover dims: {sorted(extra)}")
        da = da.transpose('lat', 'lon').load()

    da.attrs['decade'] = decade
    return da

# ========================================================================================================================
# Function aggregate_chunks
# ========================================================================================================================

def aggregate_chunks(data, lat_range, lon_range, chunk_size=100, name='Average_AGB'):
    """
    Average a high-resolution field over non-overlapping chunk_size × chunk_size blocks
    inside a latitude/longitude box. Incomplete blocks at the edges are dropped.

    Parameters
    ----------
    data : xr.DataArray
        Field with (lat, lon) dims, e.g. ESA CCI above-ground biomass.
    lat_range, lon_range : tuple
        (start, end) of the box, inclusive, degrees.
    chunk_size : int
        Cells per block side. Default 100.

    Returns
    -------
    pd.DataFrame
        Columns Lon, Lat (block centres) and `name` (block mean, NaN ignored).

    Example
    -------
    agb = xr.open_dataset('ESACCI-BIOMASS-L4-AGB-MERGED-100m-2010-fv4.0.nc')['agb'].isel(time=0)
    alaska = aggregate_chunks(agb, (51, 72), (-172, -130))
    """
    data = _standardise_coords(data)
    lat = data['lat'].values
    lon = data['lon'].values
    lat_mask = (lat >= lat_range[0]) & (lat <= lat_range[1])
    lon_mask = (lon >= lon_range[0]) & (lon <= lon_range[1])
    box = data.isel(lat=np.flatnonzero(lat_mask), lon=np.flatnonzero(lon_mask))

    blocks = box.coarsen(lat=chunk_size, lon=chunk_size, boundary='trim').mean(skipna=True)
    df = blocks.rename(name).to_dataframe().reset_index()
    df = df.rename(columns={'lon': 'Lon', 'lat': 'Lat'})
    return df[['Lon', 'Lat', name]]
