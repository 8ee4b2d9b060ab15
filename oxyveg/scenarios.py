from enum import Enum
from pathlib import Path

from oxyveg.aggregation import AggregationMode
from oxyveg.utilities import format_oxygen

# ========================================================================================================================
# Simulation scenarios
# ========================================================================================================================

class Scenario(Enum):
    """Vegetation-based oxygen feedbacks switched on in an LPJ-LMfire run."""
    FIRE_ONLY = 'fire_only'
    PHOTO_ONLY = 'photo_only'
    FIRE_AND_PHOTO = 'fire_and_photo'

    @property
    def label(self):
        """Column prefix in the spreadsheets, e.g. 'FIRE_ONLY'."""
        return self.value.upper()


# scenario -> (subfolder, filename template) of the main oxygen sweep
SCENARIO_FILES = {
    Scenario.FIRE_ONLY: ('oxygen_fire', '{oxygen}_fire_july22.nc'),
    Scenario.PHOTO_ONLY: ('oxygen_productivity', '{oxygen}_andre.nc'),
    Scenario.FIRE_AND_PHOTO: ('oxygen_fire_productivity', '{oxygen}_both_oct.nc'),
}

# Climate configuration runs share one template; their subfolder is the scenario name
CLIMATE_TEMPLATE = '{config}_{scenario}_O2{oxygen}.nc'

CLIMATE_CONFIGS = ('LPJ_high_CO2', 'LPJ_high_temp', 'LPJ_high_CO2_temp', 'LPJ_high_CO2_temp_precip')


def scenario_filepath(basepath, scenario, oxygen, folder=None, config_label=''):
    """
    Absolute path of the output file of one scenario at one oxygen level.

    Parameters
    ----------
    basepath : str or Path
        Directory holding the scenario subfolders.
    scenario : Scenario or str
    oxygen : float
        Oxygen level (%).
    folder : str, optional
        Subfolder override. Defaults to the scenario's own folder.
    config_label : str, optional
        Climate configuration, e.g. 'LPJ_high_CO2'. Switches to the climate template.

    Example
    -------
    scenario_filepath('/data', 'fire_only', 20.95)
    # PosixPath('/data/oxygen_fire/20.95_fire_july22.nc')
    """
    scenario = Scenario(scenario)
    ox = format_oxygen(oxygen)
    if config_label:
        filename = CLIMATE_TEMPLATE.format(config=config_label, scenario=scenario.value, oxygen=ox)
        folder = folder or scenario.value
    else:
        default_folder, template = SCENARIO_FILES[scenario]
        filename = template.format(oxygen=ox)
        folder = folder or default_folder
    return Path(basepath).absolute() / folder / filename

# ========================================================================================================================
# Output variables
# ========================================================================================================================

# variable -> how its grid is reduced to a global total; anything else is summed as biomass
VARIABLE_MODES = {
    'forestcov': AggregationMode.FOREST_AREA,
    'mnfire': AggregationMode.FIRE_COUNT,
}


def aggregation_mode(variable):
    return VARIABLE_MODES.get(variable, AggregationMode.SUM_BIOMASS)

# ========================================================================================================================
# Parameter sensitivity families
# ========================================================================================================================

class SensitivityFamily(Enum):
    FIRE = 'fire'
    PHOTO = 'photo'
    BOTH = 'both'


# MoE: moisture of extinction, HoC: heat of combustion,
# tau25: CO2/O2 specificity at 25 °C, nresp: respiration parameter
SENSITIVITY_PARAMS = {
    SensitivityFamily.FIRE: ('MoE', 'HoC'),
    SensitivityFamily.PHOTO: ('tau25', 'nresp'),
    SensitivityFamily.BOTH: ('MoE', 'HoC', 'tau25', 'nresp'),
}

SENSITIVITY_TEMPLATE = 'May_{family}_{oxygen}_{params}.nc'


def sensitivity_parameters(family):
    return SENSITIVITY_PARAMS[SensitivityFamily(family)]


def sensitivity_filepath(basepath, family, oxygen, combination):
    """
    Path of one parameter-test run.

    Parameters
    ----------
    combination : dict
        Parameter name -> 1 (min) or 2 (max), in parameter order.

    Example
    -------
    sensitivity_filepath('/tests', 'fire', 25, {'MoE': 1, 'HoC': 2})
    # PosixPath('/tests/May_fire_25_MoE_1_HoC_2.nc')
    """
    family = SensitivityFamily(family)
    params = '_'.join(f'{name}_{index}' for name, index in combination.items())
    filename = SENSITIVITY_TEMPLATE.format(family=family.value, oxygen=format_oxygen(oxygen), params=params)
    return Path(basepath).absolute() / filename
