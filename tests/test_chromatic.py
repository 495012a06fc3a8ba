"""Tests for longitudinal chromatic aberration and defocus conversions."""

import numpy as np
import pytest

from wvflib import ConfigurationError, Wavefront
from wvflib.psf.chromatic import (
    defocus_from_wavelength_difference,
    diopters_to_microns,
    explicit_defocus_microns,
    lca_diopters,
    lca_microns,
    nominal_focus_diopters,
)


def _reference_lca(wl1, wl2):
    constant = 1.8859 - (0.63346 / (0.001 * wl1 - 0.2141))
    return 1.8859 - constant - (0.63346 / (0.001 * wl2 - 0.2141))


class TestLCA:
    """Tests for lca_diopters."""

    @pytest.mark.parametrize("wl", [380.0, 450.0, 550.0, 632.8, 700.0, 830.0])
    def test_zero_for_same_wavelength(self, wl):
        assert lca_diopters(wl, wl) == 0.0

    @pytest.mark.parametrize("wl1, wl2", [(550, 450), (550, 650), (400, 700)])
    def test_matches_reference_formula(self, wl1, wl2):
        assert np.isclose(lca_diopters(wl1, wl2), _reference_lca(wl1, wl2))

    def test_blue_needs_negative_power(self):
        # The eye is more myopic for short wavelengths
        assert lca_diopters(550, 450) < 0
        assert lca_diopters(550, 650) > 0

    def test_antisymmetric_and_additive(self):
        assert np.isclose(lca_diopters(450, 650), -lca_diopters(650, 450))
        assert np.isclose(
            lca_diopters(450, 550) + lca_diopters(550, 650), lca_diopters(450, 650)
        )

    def test_vector_input(self):
        waves = np.array([450.0, 550.0, 650.0])
        result = lca_diopters(550.0, waves)
        assert result.shape == (3,)
        assert result[1] == 0.0
        assert np.allclose(result, [_reference_lca(550.0, w) for w in waves])

    @pytest.mark.parametrize("wl1, wl2", [(214.1, 550.0), (550.0, 214.1)])
    def test_singularity_raises(self, wl1, wl2):
        with pytest.raises(ConfigurationError, match="214.1"):
            lca_diopters(wl1, wl2)


class TestDefocusConversion:
    """Tests for diopter to micron conversion and focus corrections."""

    def test_diopters_to_microns(self):
        assert np.isclose(diopters_to_microns(1.0, 3.0), 9.0 / (16.0 * np.sqrt(3.0)))
        assert diopters_to_microns(0.0, 6.0) == 0.0

    def test_linear_in_diopters(self):
        assert np.isclose(diopters_to_microns(-2.0, 6.0), -2.0 * diopters_to_microns(1.0, 6.0))

    def test_explicit_defocus_uses_measured_pupil(self):
        wvf = Wavefront(
            measured_pupil_mm=6.0,
            calc_pupil_mm=3.0,
            calc_focus_correction_d=1.5,
            measured_focus_correction_d=0.5,
        )
        assert np.isclose(explicit_defocus_microns(wvf), diopters_to_microns(1.0, 6.0))

    def test_explicit_defocus_independent_of_wavelength(self):
        wvf = Wavefront(calc_focus_correction_d=1.0)
        before = explicit_defocus_microns(wvf)
        wvf.wavelengths_nm = [450.0]
        assert explicit_defocus_microns(wvf) == before

    def test_nominal_focus_zero_by_default(self):
        assert nominal_focus_diopters(Wavefront()) == 0.0

    def test_lca_microns_at_measured_wavelength(self):
        wvf = Wavefront(measured_wavelength_nm=550.0)
        assert lca_microns(wvf, 550.0) == 0.0

    def test_lca_microns_includes_nominal_focus(self):
        wvf = Wavefront(
            measured_pupil_mm=3.0,
            calc_pupil_mm=3.0,
            measured_wavelength_nm=550.0,
            nominal_focus_wavelength_nm=600.0,
        )
        expected = diopters_to_microns(lca_diopters(600.0, 550.0), 3.0)
        assert np.isclose(lca_microns(wvf, 550.0), expected)

    def test_defocus_from_wavelength_difference(self):
        wvf = Wavefront(
            measured_pupil_mm=6.0,
            wavelengths_nm=[450.0, 550.0, 650.0],
            nominal_focus_wavelength_nm=550.0,
            calc_focus_correction_d=0.25,
        )
        defocus = defocus_from_wavelength_difference(wvf)
        expected = diopters_to_microns(
            lca_diopters(550.0, np.array([450.0, 550.0, 650.0])) + 0.25, 6.0
        )
        assert defocus.shape == (3,)
        assert np.allclose(defocus, expected)
        assert np.isclose(defocus[1], diopters_to_microns(0.25, 6.0))
