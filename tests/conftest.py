import numpy as np
import pytest
import xarray as xr

from oxyveg.utilities import calc_grid_cell_area

LAT = np.arange(-60.0, 61.0, 30.0)     # 5 rows
LON = np.arange(-150.0, 151.0, 60.0)   # 6 columns


def make_grid(value=1.0, lat=LAT, lon=LON):
    data = np.full((len(lat), len(lon)), float(value))
    return xr.DataArray(data, dims=('lat', 'lon'), coords={'lat': lat, 'lon': lon})


def total_area(lat=LAT, lon=LON):
    return float(calc_grid_cell_area(lat, lon).sum())


def write_lpj_file(path, variables, n_years=12, slope=0.0):
    """Write a small LPJ-LMfire-like file; each variable is uniform in space, value + slope * year."""
    time = np.arange(n_years)
    data_vars = {}
    for name, value in variables.items():
        ramp = value + slope * time
        data = np.broadcast_to(ramp[:, None, None], (n_years, len(LAT), len(LON))).copy()
        data_vars[name] = (('time', 'lat', 'lon'), data)
    ds = xr.Dataset(data_vars, coords={'time': time, 'lat': LAT, 'lon': LON})
    path.parent.mkdir(parents=True, exist_ok=True)
    ds.to_netcdf(path)
    return path


class FakeReducer:
    """Reducer serving uniform grids from a {(filename): value} table; unknown files fail."""

    def __init__(self, values):
        self.values = values
        self.calls = []

    def __call__(self, filepath, variable):
        self.calls.append((filepath.name, variable))
        key = (filepath.name, variable)
        if key not in self.values:
            raise FileNotFoundError(f'No such file: {filepath}')
        return make_grid(self.values[key])


@pytest.fixture
def grid_area():
    return total_area()
