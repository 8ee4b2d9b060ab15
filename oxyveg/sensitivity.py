import itertools
import logging
import warnings

import numpy as np
import pandas as pd

from oxyveg.alignment import check_unique_levels
from oxyveg.collect import run_cells
from oxyveg.reduction import decadal_average
from oxyveg.results import OxygenLevelSkipped
from oxyveg.scenarios import SensitivityFamily, sensitivity_filepath, sensitivity_parameters
from oxyveg.utilities import SENSITIVITY_OXYGEN

logger = logging.getLogger(__name__)

# ========================================================================================================================
# Function parameter_combinations
# ========================================================================================================================

def parameter_combinations(params):
    """
    Every min (1) / max (2) assignment of the parameters, 2**len(params) in total.
    The first parameter varies fastest.

    Example
    -------
    parameter_combinations(['MoE', 'HoC'])
    # [{'MoE': 1, 'HoC': 1}, {'MoE': 2, 'HoC': 1}, {'MoE': 1, 'HoC': 2}, {'MoE': 2, 'HoC': 2}]
    """
    params = list(params)
    return [
        dict(zip(params, reversed(indices)))
        for indices in itertools.product((1, 2), repeat=len(params))
    ]


def combination_label(variable, combination):
    """Column name of one combination, e.g. 'forestcov_1_2'."""
    return '_'.join([variable] + [str(index) for index in combination.values()])

# ========================================================================================================================
# Function collect_parameter_grid
# ========================================================================================================================

def collect_parameter_grid(family, variables, basepath, oxygen_levels=SENSITIVITY_OXYGEN,
                           reducer=decadal_average, max_workers=1, progress=False):
    """
    Global totals over oxygen levels × parameter combinations, one table per variable.

    Parameters
    ----------
    family : SensitivityFamily or str
        'fire' (MoE, HoC), 'photo' (tau25, nresp) or 'both' (all four).
    variables : sequence of str
    basepath : str or Path
        Directory holding the May_{family}_... runs.
    oxygen_levels : sequence of float
    reducer : callable, optional
        (filepath, variable) -> xr.DataArray (lat, lon).
    max_workers : int, optional

    Returns
    -------
    dict
        {variable: pd.DataFrame} with an 'O2_conc' column plus one column per
        combination. Cells that failed are NaN; their rows are kept.

    Warns
    -----
    OxygenLevelSkipped
        Once for every failed cell.
    """
    family = SensitivityFamily(family)
    combinations = parameter_combinations(sensitivity_parameters(family))
    oxygen_levels = list(oxygen_levels)
    check_unique_levels(oxygen_levels)

    tables = {}
    for variable in variables:
        cells = [(ox, combination) for ox in oxygen_levels for combination in combinations]
        paths = [sensitivity_filepath(basepath, family, ox, combination) for ox, combination in cells]
        results = run_cells(((path, variable, reducer) for path in paths),
                            max_workers=max_workers, progress=progress, desc=f'{family.value} {variable}')

        for path, result in zip(paths, results):
            if not result.ok:
                logger.debug('%s: %s', path, result.reason)
                warnings.warn(f'Skipping: {path}: {result.reason}', OxygenLevelSkipped, stacklevel=2)

        values = np.array([result.unwrap() for result in results], dtype=float)
        values = values.reshape(len(oxygen_levels), len(combinations))
        columns = [combination_label(variable, combination) for combination in combinations]
        table = pd.DataFrame(values, columns=columns)
        table.insert(0, 'O2_conc', np.asarray(oxygen_levels, dtype=float))
        tables[variable] = table
    return tables


def combine_parameter_tables(tables):
    """Side-by-side table of every variable, with a single 'O2_conc' column."""
    tables = list(tables.values()) if isinstance(tables, dict) else list(tables)
    if not tables:
        raise ValueError('No parameter tables to combine')
    return pd.concat([tables[0]] + [table.drop(columns='O2_conc') for table in tables[1:]], axis=1)

# ========================================================================================================================
# Helpers
# ========================================================================================================================

def parameter_envelope(table):
    """
    Minimum and maximum across parameter combinations at each oxygen level,
    ignoring missing cells.
    """
    melted = table.melt(id_vars='O2_conc')
    return (
        melted.groupby('O2_conc', sort=False)['value']
        .agg(min_value='min', max_value='max')
        .reset_index()
    )


def moisture_of_extinction(O2):
    """Moisture of extinction (%) against O2 (%), after Watson & Lovelock."""
    return 8 * O2 - 128
