import numpy as np
import pytest
import xarray as xr

from conftest import LAT, LON, make_grid
from oxyveg.aggregation import AggregationMode, binarise_forest, global_total
from oxyveg.utilities import EARTH_RADIUS_KM, calc_grid_cell_area, format_oxygen


def test_global_grid_area_matches_sphere():
    lat = np.arange(-89.5, 90, 1.0)
    lon = np.arange(-179.5, 180, 1.0)
    area = calc_grid_cell_area(lat, lon)
    sphere = 4 * np.pi * (EARTH_RADIUS_KM * 1e3) ** 2
    assert float(area.sum()) == pytest.approx(sphere, rel=1e-9)
    # Equatorial cells are the largest
    assert float(area.sel(lat=0.5, lon=0.5)) > float(area.sel(lat=60.5, lon=0.5))


def test_single_row_grid_has_no_resolution():
    with pytest.raises(ValueError):
        calc_grid_cell_area([10.0], [0.0, 1.0])


def test_biomass_is_area_weighted_integral(grid_area):
    total = global_total(make_grid(1000.0), AggregationMode.SUM_BIOMASS)
    assert total == pytest.approx(1000.0 * grid_area / 1e15)


def test_biomass_ignores_missing_cells(grid_area):
    grid = make_grid(500.0)
    area = calc_grid_cell_area(LAT, LON)
    grid[0, 0] = np.nan
    expected = 500.0 * (grid_area - float(area[0, 0])) / 1e15
    assert global_total(grid, AggregationMode.SUM_BIOMASS) == pytest.approx(expected)


def test_forest_area_uses_hard_threshold():
    grid = make_grid(0.59)
    grid[2, :] = 0.6    # equator row, exactly on the threshold
    grid[0, 0] = 0.95
    area = calc_grid_cell_area(LAT, LON)
    expected = (float(area[2, :].sum()) + float(area[0, 0])) / 1e6
    assert global_total(grid, AggregationMode.FOREST_AREA) == pytest.approx(expected)


def test_binarise_keeps_missing_cells():
    grid = xr.DataArray([[0.2, 0.7], [np.nan, 0.6]], dims=('lat', 'lon'))
    forest = binarise_forest(grid)
    assert forest.values[0].tolist() == [0.0, 1.0]
    assert np.isnan(forest.values[1, 0])
    assert forest.values[1, 1] == 1.0


def test_fire_count_is_a_plain_sum():
    grid = make_grid(2.0)
    grid[1, 1] = np.nan
    assert global_total(grid, AggregationMode.FIRE_COUNT) == 2.0 * (grid.size - 1)


def test_mode_accepts_value_strings(grid_area):
    assert global_total(make_grid(1.0), 'forest') == pytest.approx(grid_area / 1e6)


def test_grid_without_lat_lon_is_rejected():
    grid = xr.DataArray(np.ones((2, 2)), dims=('y', 'x'))
    with pytest.raises(ValueError):
        global_total(grid)


def test_format_oxygen():
    assert format_oxygen(16) == '16'
    assert format_oxygen(25.0) == '25'
    assert format_oxygen(20.95) == '20.95'
