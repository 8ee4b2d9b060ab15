import logging
import warnings
from concurrent.futures import ThreadPoolExecutor

import pandas as pd
from tqdm import tqdm

from oxyveg.aggregation import global_total
from oxyveg.reduction import decadal_average
from oxyveg.results import CellResult, OxygenLevelSkipped
from oxyveg.scenarios import Scenario, aggregation_mode, scenario_filepath

logger = logging.getLogger(__name__)

# ========================================================================================================================
# Cell evaluation
# ========================================================================================================================

def evaluate_cell(filepath, variable, reducer=decadal_average):
    """
    Read one output file and reduce `variable` to its global total.

    Any failure (missing file, corrupt data, aggregation error) is returned as an
    absent CellResult instead of being raised.
    """
    try:
        grid = reducer(filepath, variable)
        value = global_total(grid, aggregation_mode(variable))
    except Exception as e:
        return CellResult.absent(f'{type(e).__name__}: {e}')
    return CellResult.success(value)


def run_cells(cells, max_workers=1, progress=False, desc=None):
    """
    Evaluate (filepath, variable, reducer) cells, keeping the input order.

    With max_workers > 1 the cells run on a bounded thread pool. A failing cell
    only produces an absent result; its siblings carry on.
    """
    cells = list(cells)
    if max_workers is None or max_workers <= 1:
        return [evaluate_cell(*cell) for cell in tqdm(cells, desc=desc, disable=not progress)]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = executor.map(lambda cell: evaluate_cell(*cell), cells)
        return list(tqdm(results, total=len(cells), desc=desc, disable=not progress))

# ========================================================================================================================
# Function collect_oxygen_series
# ========================================================================================================================

def collect_oxygen_series(scenario, variable, oxygen_levels, basepath, folder=None, config_label='',
                          reducer=decadal_average, max_workers=1, progress=False):
    """
    Global totals of one variable across an oxygen sweep.

    Parameters
    ----------
    scenario : Scenario or str
    variable : str
    oxygen_levels : sequence of float
        Requested oxygen levels (%), in output order.
    basepath : str or Path
        Directory holding the scenario subfolders.
    folder : str, optional
        Subfolder override for this scenario.
    config_label : str, optional
        Climate configuration label; selects the climate filename template.
    reducer : callable, optional
        (filepath, variable) -> xr.DataArray (lat, lon). Default decadal_average.
    max_workers : int, optional
        Thread pool size; 1 runs sequentially.

    Returns
    -------
    pd.Series
        Global totals indexed by 'O2', only for the levels that succeeded.

    Warns
    -----
    OxygenLevelSkipped
        Once for every level that could not be read or aggregated.
    """
    scenario = Scenario(scenario)
    oxygen_levels = list(oxygen_levels)
    paths = [scenario_filepath(basepath, scenario, ox, folder=folder, config_label=config_label)
             for ox in oxygen_levels]
    results = run_cells(((path, variable, reducer) for path in paths),
                        max_workers=max_workers, progress=progress, desc=f'{scenario.value} {variable}')

    levels, values = [], []
    for ox, path, result in zip(oxygen_levels, paths, results):
        if result.ok:
            levels.append(ox)
            values.append(result.value)
            continue
        logger.debug('%s: %s', path, result.reason)
        warnings.warn(
            f'Skipping oxygen level {ox} for {scenario.value} {variable}: {result.reason}',
            OxygenLevelSkipped, stacklevel=2,
        )
    return pd.Series(values, index=pd.Index(levels, name='O2', dtype=float), name=variable, dtype=float)


def collect_scenario(scenario, variables, oxygen_levels, basepath, folder=None, config_label='',
                     reducer=decadal_average, max_workers=1, progress=False):
    """Oxygen series of every variable of one scenario, as {variable: pd.Series}."""
    return {
        variable: collect_oxygen_series(
            scenario, variable, oxygen_levels, basepath, folder=folder, config_label=config_label,
            reducer=reducer, max_workers=max_workers, progress=progress,
        )
        for variable in variables
    }
