"""
Spreadsheets of global totals from LPJ-LMfire output.

Three families of spreadsheets are produced:

1. Master: the main simulations (fire only, photorespiration only, both).
2. Sensitivity: min/max parameter combinations per feedback family.
3. Climate configurations: the main simulations under high CO2 / temperature /
   precipitation climates.
"""

import logging
from enum import Enum
from pathlib import Path

from oxyveg.alignment import align_scenarios, align_variables, check_reference
from oxyveg.collect import collect_scenario
from oxyveg.config import StudyConfig
from oxyveg.reduction import decadal_average
from oxyveg.scenarios import Scenario, SensitivityFamily
from oxyveg.sensitivity import collect_parameter_grid, combine_parameter_tables
from oxyveg.utilities import DEFAULT_OXYGEN, REFERENCE_O2, SENSITIVITY_OXYGEN

logger = logging.getLogger(__name__)

TOTALS_SUBDIR = Path('data/LPJLMfire_output/totals')


class SpreadsheetKind(Enum):
    ALL = 'all'
    MASTER = 'master'
    SENSITIVITY = 'sensitivity'
    CLIMATE = 'climate'

    @classmethod
    def parse(cls, which):
        if isinstance(which, cls):
            return which
        try:
            return cls(str(which).lower())
        except ValueError:
            raise ValueError(f"which_spreadsheet must be one of {[k.value for k in cls]}, got {which!r}") from None


def write_spreadsheet(df, save_dir, outfile):
    """Write a table to save_dir/outfile (.xlsx). Write errors propagate to the caller."""
    outfile_path = Path(save_dir) / outfile
    outfile_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_excel(outfile_path, index=False)
    logger.info('Done! Output saved as %s', outfile_path)
    return outfile_path

# ========================================================================================================================
# Function generate_global_totals
# ========================================================================================================================

def generate_global_totals(basepath, simulations=None, simfolders=None, config='', outfile='',
                           varnames=('NPP', 'pftalbiomass', 'forestcov'), oxygen=DEFAULT_OXYGEN,
                           save_dir=None, reducer=decadal_average, max_workers=1, progress=False):
    """
    Global totals and normalised values of every scenario across an oxygen sweep.

    Parameters
    ----------
    basepath : str or Path
        Directory containing the scenario subfolders.
    simulations : sequence of str, optional
        Scenario names. Default fire_only, photo_only, fire_and_photo.
    simfolders : sequence of str, optional
        Subfolder of each scenario. Default: each scenario's own folder.
    config : str, optional
        Climate configuration label, empty for the main simulations.
    outfile : str, optional
        Spreadsheet name; nothing is written when empty.
    varnames : sequence of str
    oxygen : sequence of float
        Must hold the 20.95 reference exactly once.
    save_dir : str or Path, optional
        Output directory. Default: current directory.

    Returns
    -------
    pd.DataFrame
        'O2' plus '{SCENARIO}_{variable}_val' / '_norm' columns.

    Raises
    ------
    ReferenceLevelError
        When 20.95 is not in `oxygen`, or is lost for any scenario or variable.
    ValueError
        When `oxygen` lists a level twice.
    OSError
        When the spreadsheet cannot be written.
    """
    check_reference(oxygen, REFERENCE_O2)
    simulations = [Scenario(s) for s in (simulations or list(Scenario))]
    simfolders = list(simfolders) if simfolders else [None] * len(simulations)
    if len(simfolders) != len(simulations):
        raise ValueError('simulations and simfolders must have the same length')

    tables = {}
    for scenario, folder in zip(simulations, simfolders):
        logger.info('Processing simulation: %s in folder: %s', scenario.value, folder or 'default')
        series = collect_scenario(
            scenario, varnames, oxygen, basepath, folder=folder, config_label=config,
            reducer=reducer, max_workers=max_workers, progress=progress,
        )
        tables[scenario] = align_variables(series, REFERENCE_O2)

    outdf = align_scenarios(tables, REFERENCE_O2)
    if outfile:
        write_spreadsheet(outdf, save_dir or Path.cwd(), outfile)
    return outdf

# ========================================================================================================================
# Function generate_param_spreadsheet
# ========================================================================================================================

def generate_param_spreadsheet(simname, variables, basepath, O2_concs=SENSITIVITY_OXYGEN, save_dir=None,
                               reducer=decadal_average, max_workers=1, progress=False):
    """
    Parameter sensitivity spreadsheet '{simname}_param_generated.xlsx'.

    Every variable gets one column per min/max parameter combination; cells whose
    run is missing or unreadable are left empty.
    """
    family = SensitivityFamily(simname)
    tables = collect_parameter_grid(family, variables, basepath, oxygen_levels=O2_concs,
                                    reducer=reducer, max_workers=max_workers, progress=progress)
    outdf = combine_parameter_tables(tables)
    write_spreadsheet(outdf, save_dir or Path.cwd(), f'{family.value}_param_generated.xlsx')
    return outdf

# ========================================================================================================================
# Function create_totals_spreadsheets
# ========================================================================================================================

def create_totals_spreadsheets(main_dir, data_dir=None, which_spreadsheet='ALL', config=None, reducer=decadal_average,
                               progress=False):
    """
    Regenerate the master, sensitivity and/or climate configuration spreadsheets.

    Parameters
    ----------
    main_dir : str or Path
        Project directory; spreadsheets go under data/LPJLMfire_output/totals
        unless `config.output_dir` is set.
    data_dir : str or Path, optional
        LPJ-LMfire output directory. Default `config.input_dir`.
    which_spreadsheet : str
        'ALL', 'master', 'sensitivity' or 'climate'.
    config : StudyConfig, optional

    Returns
    -------
    dict
        {spreadsheet name: pd.DataFrame}
    """
    which = SpreadsheetKind.parse(which_spreadsheet)
    config = config or StudyConfig()
    data_dir = data_dir or config.input_dir
    if data_dir is None:
        raise ValueError("No LPJ-LMfire output directory given (data_dir or config.input_dir)")
    data_dir = Path(data_dir)
    totals_dir = Path(config.output_dir) if config.output_dir else Path(main_dir) / TOTALS_SUBDIR

    outputs = {}
    if which in (SpreadsheetKind.ALL, SpreadsheetKind.MASTER):
        outputs[config.outfile] = generate_global_totals(
            basepath=data_dir,
            simulations=config.scenarios,
            simfolders=config.simfolders,
            config=config.climate_config,
            outfile=config.outfile,
            varnames=config.variables,
            oxygen=config.oxygen,
            save_dir=totals_dir,
            reducer=reducer,
            max_workers=config.max_workers,
            progress=progress,
        )

    if which in (SpreadsheetKind.ALL, SpreadsheetKind.SENSITIVITY):
        for family in config.sensitivity_families:
            outputs[f'{family}_param_generated.xlsx'] = generate_param_spreadsheet(
                simname=family,
                variables=config.sensitivity_variables,
                basepath=data_dir / 'May_param_tests' / f'{family}_param',
                O2_concs=config.sensitivity_oxygen,
                save_dir=totals_dir / 'parameter_tests',
                reducer=reducer,
                max_workers=config.max_workers,
                progress=progress,
            )

    if which in (SpreadsheetKind.ALL, SpreadsheetKind.CLIMATE):
        for cc in config.climate_configs:
            outfile = f'{cc}_generated.xlsx'
            outputs[outfile] = generate_global_totals(
                basepath=data_dir / 'late_cret_2025' / cc,
                simulations=config.scenarios,
                config=cc,
                outfile=outfile,
                varnames=config.variables,
                oxygen=config.oxygen,
                save_dir=totals_dir / 'climate_configurations',
                reducer=reducer,
                max_workers=config.max_workers,
                progress=progress,
            )
    return outputs
