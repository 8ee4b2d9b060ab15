import numpy as np
import pandas as pd
import xarray as xr

from oxyveg.utilities import calc_APAR

# ========================================================================================================================
# Module BIOME3Photosynthesis
# ========================================================================================================================

class BIOME3Photosynthesis:
    """
    Daily gross photosynthesis following the LPJ-LMfire photosynthesis submodule,
    derived from BIOME3 (Haxeltine & Prentice, 1996).

    The model is evaluated for a single, frozen environment (day length, intercepted
    PAR, net PAR and air temperature are fixed literals). It is meant to show the
    response of gross assimilation to atmospheric O2 and CO2, not to simulate a site.

    References
    ----------
    - Haxeltine, A. & Prentice, I. C. (1996). *A general model for the light-use efficiency
      of primary production.* Functional Ecology, 10(5), 551–561.
    - Sitch, S. et al. (2003). *Evaluation of ecosystem dynamics, plant geography and terrestrial
      carbon cycling in the LPJ dynamic global vegetation model.* Global Change Biology, 9, 161–185.

    Parameters
    ----------
    mode : str
        'C3' or 'C4'

    Notes
    -----
    - The fixed environment is a known limitation: daylength 11 h, fPAR 4.1763796e-3,
      PAR 7233130 J m⁻² day⁻¹ and 20 °C.
    - Inputs are not validated. Negative or zero O2 is passed straight through.
    """

    # ------------------- Model parameters -------------------
    alphaa = 0.5        # PAR scaling factor (ecosystem vs leaf level)
    alphac3 = 0.08      # Quantum efficiency of CO2 uptake (C3)
    alphac4 = 0.053     # Quantum efficiency of CO2 uptake (C4)
    bc3 = 0.015         # Leaf respiration as fraction of Vmax (C3)
    bc4 = 0.02          # Leaf respiration as fraction of Vmax (C4)
    cmass = 12.0        # Atomic mass of carbon
    cq = 4.6e-6         # Conversion factor for radiation (J m⁻² -> E m⁻²)
    kc25 = 30.0         # Michaelis constant for CO2 at 25 °C (Pa)
    ko25 = 3e4          # Michaelis constant for O2 at 25 °C (Pa)
    p = 1e5             # Atmospheric pressure (Pa)
    q10kc = 2.1         # Q10 for kc
    q10ko = 1.2         # Q10 for ko
    q10tau = 0.57       # Q10 for tau
    tau25_ratio = 0.132 # CO2/O2 specificity ratio scaled for Pa at 25 °C
    theta = 0.7         # Co-limitation (shape) parameter
    tmc3 = 45.0         # Max temperature for C3 photosynthesis (°C)
    tmc4 = 55.0         # Max temperature for C4 photosynthesis (°C)
    lambdam = 0.9       # Optimal ci:ca ratio

    # ------------------- Frozen environment -------------------
    dayl = 11.0             # Day length (h)
    fpar = 4.1763796e-03    # Fraction of PAR intercepted
    par = 7233130.0         # Net photosynthetically active radiation (J m⁻² day⁻¹)
    temp = 20.0             # Air temperature (°C)

    # Temperature inhibition ramps (°C)
    x1, x2, x3, x4 = 2.0, 25.0, 30.0, 55.0

    def __init__(self, mode='C3') -> None:
        self.mode = mode.upper()
        if self.mode not in ['C3', 'C4']:
            raise ValueError("mode must be 'C3' or 'C4'")

    # ------------------- Internal methods -------------------

    @classmethod
    def _absorbed_par(cls):
        """APAR (J m⁻² day⁻¹)."""
        return calc_APAR(cls.par, cls.fpar, cls.alphaa)

    @classmethod
    def _temperature_inhibition(cls, temp):
        """
        Product of a rising logistic between x1 and x2 and a falling exponential
        cutoff between x3 and x4. Values under 1e-2 are set to exactly zero.
        """
        if temp >= cls.x4:
            return 0.0
        k1 = 2.0 * np.log((1.0 / 0.99) - 1.0) / (cls.x1 - cls.x2)
        k2 = (cls.x1 + cls.x2) / 2.0
        low = 1.0 / (1.0 + np.exp(k1 * (k2 - temp)))

        k3 = np.log(0.99 / 0.01) / (cls.x4 - cls.x3)
        high = 1.0 - 0.01 * np.exp(k3 * (temp - cls.x3))

        tstress = low * high
        if tstress < 1e-2:
            tstress = 0.0
        return tstress

    @classmethod
    def calc_gammastar(cls, O2, temp=None):
        """CO2 compensation point Γ* (Pa) for O2 given in % volume."""
        if temp is None:
            temp = cls.temp
        tau = cls.tau25_ratio * cls.q10tau ** ((temp - 25.0) / 10.0)
        return ((2.0 / 3.0) * (O2 / tau)) * 0.101325

    def _c3_terms(self, O2, CO2, tstress):
        """Quantum efficiency term c1 and Rubisco term c2 for C3 plants."""
        O2 = np.float64(O2)
        CO2 = np.float64(CO2)
        temp = self.temp
        ko = self.ko25 * self.q10ko ** ((temp - 25.0) / 10.0)
        kc = self.kc25 * self.q10kc ** ((temp - 25.0) / 10.0)
        gammastar = self.calc_gammastar(O2, temp)

        pa = CO2 * self.p           # Ambient CO2 (Pa)
        pi = self.lambdam * pa      # Intercellular CO2 (Pa)

        c1 = tstress * self.alphac3 * ((pi - gammastar) / (pi + 2.0 * gammastar))
        if temp > self.tmc3:
            c1 = 0.0
        c2 = (pi - gammastar) / (pi + kc * (1.0 + (O2 * 1e3) / ko))
        return c1, c2, self.bc3

    def _c4_terms(self, tstress):
        c1 = tstress * self.alphac4
        if self.temp > self.tmc4:
            c1 = 0.0
        return c1, 1.0, self.bc4

    # ------------------- Public methods -------------------

    def daily_rates(self, O2, CO2):
        """
        Evaluate the full daily photosynthesis budget.

        Parameters
        ----------
        O2 : float
            Atmospheric oxygen concentration (% volume, e.g. 20.95)
        CO2 : float
            Atmospheric CO2 mole fraction (e.g. 0.0004 for 400 ppm)

        Returns
        -------
        dict
            - 'apar' : absorbed PAR (J m⁻² day⁻¹)
            - 'tstress' : temperature inhibition (-)
            - 'vm' : Rubisco capacity (gC m⁻² day⁻¹)
            - 'je', 'jc' : PAR- and Rubisco-limited rates (gC m⁻² h⁻¹)
            - 'agd' : daily gross photosynthesis (gC m⁻² day⁻¹)
            - 'rd' : daily leaf respiration (gC m⁻² day⁻¹)
            - 'and' : daytime net photosynthesis (gC m⁻² day⁻¹)
            - 'adt' : total daytime net photosynthesis (gC m⁻² day⁻¹)
        """
        apar = self._absorbed_par()
        tstress = self._temperature_inhibition(self.temp)

        # Out-of-range O2/CO2 give NaN through numpy division rather than raising
        with np.errstate(divide='ignore', invalid='ignore'):
            if self.mode == 'C3':
                c1, c2, b = self._c3_terms(O2, CO2, tstress)
            else:
                c1, c2, b = self._c4_terms(tstress)
            return self._budget(apar, tstress, c1, c2, b)

    def _budget(self, apar, tstress, c1, c2, b):
        """Vm, Je, Jc and the co-limited daily budget from the pathway terms c1, c2 and b."""
        # Rubisco capacity from the optimality closure (Haxeltine & Prentice Eq. 11)
        theta = self.theta
        s = (24.0 / self.dayl) * b
        sigma = np.sqrt(max(0.0, 1.0 - (c2 - s) / (c2 - theta * s)))
        vm = (1.0 / b) * (c1 / c2) * ((2.0 * theta - 1.0) * s - (2.0 * theta * s - c2) * sigma) * apar * self.cmass * self.cq

        je = c1 * apar * self.cmass * self.cq / self.dayl
        jc = c2 * vm / 24.0

        if je < 1e-10 or jc <= 1e-10:
            agd = 0.0
        else:
            agd = (je + jc - np.sqrt((je + jc) ** 2.0 - 4.0 * theta * je * jc)) / (2.0 * theta) * self.dayl

        rd = b * vm
        a_net = agd - rd
        return {
            'apar': apar, 'tstress': tstress, 'vm': vm, 'je': je, 'jc': jc,
            'agd': agd, 'rd': rd, 'and': a_net, 'adt': a_net + (1.0 - self.dayl / 24.0) * rd,
        }

    def gross_photosynthesis(self, O2, CO2):
        """Daily gross photosynthesis Agd (gC m⁻² day⁻¹), before respiration."""
        return float(self.daily_rates(O2, CO2)['agd'])


def calc_gross_photosynthesis(O2, CO2, pathway='C3'):
    """
    Daily gross photosynthesis for one O2/CO2 combination.

    Parameters
    ----------
    O2 : float
        Atmospheric oxygen (% volume)
    CO2 : float
        Atmospheric CO2 mole fraction
    pathway : str
        'C3' or 'C4'

    Returns
    -------
    float
        Gross photosynthesis (gC m⁻² day⁻¹)
    """
    return BIOME3Photosynthesis(pathway).gross_photosynthesis(O2, CO2)

# ------------------------------------------------------------------------------------------------------------------------
# # Example

# print("C3 Agd:", calc_gross_photosynthesis(20.95, 4e-4))
# print("C4 Agd:", calc_gross_photosynthesis(20.95, 4e-4, pathway='C4'))

# ========================================================================================================================
# Function group: compensation points
# ========================================================================================================================

def calc_gammastar(O2, temp=20.0):
    """Photorespiratory CO2 compensation point Γ* (Pa) of the C3 branch."""
    return BIOME3Photosynthesis.calc_gammastar(O2, temp)


def calc_co2_compensation(O2):
    """Linear CO2 compensation point (ppm) against O2 (%), Nisbet et al."""
    return 2.13 * O2 + 3.89


def calc_o2_compensation(CO2):
    """Linear O2 compensation point (%) against the CO2 mole fraction, Nisbet et al."""
    return 0.0246 * CO2 * 1e6 + 17.94

# ========================================================================================================================
# Function group: response surface
# ========================================================================================================================

RESPONSE_BREAKS = [-np.inf, -1e-5, 1e-5, 0.01, 0.02, np.inf]


def photosynthesis_response_surface(O2=None, CO2=None, pathway='C3'):
    """
    Gross photosynthesis over a grid of O2 and CO2.

    Parameters
    ----------
    O2 : array-like, optional
        Oxygen levels (%). Default 1, 2, ..., 100.
    CO2 : array-like, optional
        CO2 mole fractions. Default 1e-5 to 1e-3 in steps of 1e-5 (zero is skipped).
    pathway : str
        'C3' or 'C4'

    Returns
    -------
    xr.DataArray
        'photo' with dims (O2, CO2), gC m⁻² day⁻¹
    """
    if O2 is None:
        O2 = np.arange(1, 101, 1, dtype=float)
    if CO2 is None:
        CO2 = np.arange(1, 101) * 1e-5
    O2 = np.asarray(O2, dtype=float)
    CO2 = np.asarray(CO2, dtype=float)

    model = BIOME3Photosynthesis(pathway)
    photo = np.array([[model.gross_photosynthesis(o, c) for c in CO2] for o in O2])
    return xr.DataArray(
        photo, dims=('O2', 'CO2'), coords={'O2': O2, 'CO2': CO2}, name='photo',
        attrs={'units': 'gC m-2 day-1', 'pathway': pathway.upper()},
    )


def classify_response(surface, breaks=None):
    """Bin a response surface into the discrete classes used for mapping it."""
    if breaks is None:
        breaks = RESPONSE_BREAKS
    df = surface.to_dataframe().reset_index()
    df['breaks'] = pd.cut(df[surface.name], bins=breaks)
    return df
