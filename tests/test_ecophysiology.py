import numpy as np
import pytest

from oxyveg.ecophysiology import (
    BIOME3Photosynthesis, calc_co2_compensation, calc_gammastar, calc_gross_photosynthesis,
    calc_o2_compensation, classify_response, photosynthesis_response_surface,
)


def test_present_day_c3_is_positive_and_finite():
    agd = calc_gross_photosynthesis(20.95, 4e-4)
    assert np.isfinite(agd)
    assert agd > 0


def test_c3_declines_with_oxygen():
    assert calc_gross_photosynthesis(15, 4e-4) > calc_gross_photosynthesis(20.95, 4e-4) > calc_gross_photosynthesis(35, 4e-4)


def test_c3_increases_with_co2():
    assert calc_gross_photosynthesis(20.95, 2e-4) < calc_gross_photosynthesis(20.95, 8e-4)


def test_below_compensation_point_returns_exact_zero():
    # Intercellular CO2 far under the compensation point at 100 % O2
    assert calc_gross_photosynthesis(100, 1e-5) == 0.0


def test_c4_ignores_oxygen_and_co2():
    reference = calc_gross_photosynthesis(20.95, 4e-4, pathway='C4')
    assert reference > 0
    assert calc_gross_photosynthesis(35, 1e-4, pathway='C4') == reference


def test_pathways_disagree():
    assert calc_gross_photosynthesis(20.95, 4e-4, 'C3') != calc_gross_photosynthesis(20.95, 4e-4, 'C4')


def test_unknown_pathway():
    with pytest.raises(ValueError):
        BIOME3Photosynthesis('CAM')


def test_non_negative_over_valid_range():
    for o2 in (1, 10, 20.95, 50, 100):
        for co2 in (1e-5, 1e-4, 4e-4, 1e-3):
            agd = calc_gross_photosynthesis(o2, co2)
            assert np.isfinite(agd) and agd >= 0


def test_temperature_inhibition():
    model = BIOME3Photosynthesis
    assert 0 < model._temperature_inhibition(20.0) < 1
    assert model._temperature_inhibition(55.0) == 0.0
    # The rising ramp is below the cutoff this far under x1
    assert model._temperature_inhibition(-20.0) == 0.0


def test_daily_rates_budget():
    rates = BIOME3Photosynthesis('C3').daily_rates(20.95, 4e-4)
    assert rates['agd'] == calc_gross_photosynthesis(20.95, 4e-4)
    assert rates['and'] == pytest.approx(rates['agd'] - rates['rd'])
    assert rates['rd'] > 0


def test_gammastar_is_linear_in_oxygen():
    assert calc_gammastar(42.0) == pytest.approx(2 * calc_gammastar(21.0))
    assert calc_gammastar(0.0) == 0.0


def test_compensation_lines():
    assert calc_co2_compensation(20.95) == pytest.approx(2.13 * 20.95 + 3.89)
    assert calc_o2_compensation(4e-4) == pytest.approx(0.0246 * 400 + 17.94)


def test_response_surface_shape_and_classes():
    surface = photosynthesis_response_surface(O2=[10, 20.95, 90], CO2=[1e-5, 4e-4])
    assert surface.dims == ('O2', 'CO2')
    assert surface.shape == (3, 2)
    assert float(surface.sel(O2=20.95, CO2=4e-4)) == calc_gross_photosynthesis(20.95, 4e-4)

    df = classify_response(surface)
    assert len(df) == 6
    assert {'O2', 'CO2', 'photo', 'breaks'} <= set(df.columns)
    assert df['breaks'].notna().all()


def test_zero_oxygen_and_co2_give_nan():
    assert np.isnan(calc_gross_photosynthesis(0.0, 0.0))
    assert np.isnan(BIOME3Photosynthesis('C3').daily_rates(0, 0)['vm'])
