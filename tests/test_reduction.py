import numpy as np
import pytest
import xarray as xr

from conftest import LAT, LON, write_lpj_file
from oxyveg.reduction import aggregate_chunks, decadal_average


def test_decadal_average_uses_last_ten_steps(tmp_path):
    path = write_lpj_file(tmp_path / '20.95_andre.nc', {'pftalbiomass': 100.0}, n_years=12, slope=1.0)
    grid = decadal_average(path, 'pftalbiomass')
    assert grid.dims == ('lat', 'lon')
    assert grid.shape == (len(LAT), len(LON))
    # mean of years 2..11
    np.testing.assert_allclose(grid.values, 106.5)
    assert grid.attrs['decade'] == '2/11'


def test_short_runs_average_everything(tmp_path):
    path = write_lpj_file(tmp_path / 'short.nc', {'NPP': 1.0}, n_years=4, slope=1.0)
    np.testing.assert_allclose(decadal_average(path, 'NPP').values, 2.5)


def test_missing_variable(tmp_path):
    path = write_lpj_file(tmp_path / 'run.nc', {'NPP': 1.0})
    with pytest.raises(KeyError):
        decadal_average(path, 'forestcov')


def test_missing_file(tmp_path):
    with pytest.raises((FileNotFoundError, OSError)):
        decadal_average(tmp_path / 'absent.nc', 'NPP')


def _write_pft_file(path):
    pft_values = np.array([1.0, 2.0, np.nan])
    data = np.broadcast_to(pft_values[None, :, None, None], (3, 3, len(LAT), len(LON))).copy()
    ds = xr.Dataset(
        {'pftalbiomass': (('time', 'pft', 'latitude', 'longitude'), data)},
        coords={'time': np.arange(3), 'pft': np.arange(3), 'latitude': LAT, 'longitude': LON},
    )
    ds.to_netcdf(path)
    return path


def test_pft_dimension_is_summed_or_selected(tmp_path):
    path = _write_pft_file(tmp_path / 'pft.nc')

    summed = decadal_average(path, 'pftalbiomass')
    assert summed.dims == ('lat', 'lon')
    np.testing.assert_allclose(summed.values, 3.0)

    second = decadal_average(path, 'pftalbiomass', npft=2)
    np.testing.assert_allclose(second.values, 2.0)


def test_aggregate_chunks():
    lat = np.arange(0.5, 10, 1.0)
    lon = np.arange(20.5, 30, 1.0)
    values = np.arange(100, dtype=float).reshape(10, 10)
    values[0, 0] = np.nan
    data = xr.DataArray(values, dims=('y', 'x'), coords={'y': lat, 'x': lon})

    df = aggregate_chunks(data, (0, 10), (20, 30), chunk_size=4)
    # 10 cells per side leave two complete 4x4 blocks each way
    assert list(df.columns) == ['Lon', 'Lat', 'Average_AGB']
    assert len(df) == 4
    first = df[(df['Lat'] == 2.0) & (df['Lon'] == 22.0)]['Average_AGB'].item()
    assert first == pytest.approx(np.nanmean(values[:4, :4]))
