from oxyveg.ecophysiology import BIOME3Photosynthesis, calc_gross_photosynthesis, photosynthesis_response_surface
from oxyveg.aggregation import AggregationMode, global_total
from oxyveg.reduction import decadal_average
from oxyveg.collect import collect_oxygen_series, collect_scenario
from oxyveg.alignment import align_scenarios, align_variables
from oxyveg.sensitivity import collect_parameter_grid, parameter_combinations
from oxyveg.spreadsheets import create_totals_spreadsheets, generate_global_totals, generate_param_spreadsheet
from oxyveg.results import CellResult, OxygenLevelSkipped, ReferenceLevelError
from oxyveg.scenarios import Scenario, SensitivityFamily
from oxyveg.config import StudyConfig, load_config

__version__ = '0.0.1'
