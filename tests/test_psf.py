"""Tests for PSF computation from cached pupil functions."""

import numpy as np
import pytest

from wvflib import (
    DomainWarning,
    Wavefront,
    ZernikeMode,
    compute_psf,
    compute_pupil_function,
    psf_angular_sampling_arcmin,
    pupil_to_psf,
)

pytestmark = pytest.mark.filterwarnings("ignore::wvflib.errors.DomainWarning")


@pytest.fixture
def wvf():
    return Wavefront(
        measured_pupil_mm=3.0,
        calc_pupil_mm=3.0,
        wavelengths_nm=[550.0],
        spatial_samples=64,
    )


class TestPupilToPsf:
    """Tests for the FFT conversion."""

    def test_normalized(self, wvf):
        psf = pupil_to_psf(compute_pupil_function(wvf)[0])
        assert psf.shape == (64, 64)
        assert np.isclose(psf.sum(), 1.0)
        assert np.all(psf >= 0)

    def test_diffraction_limited_peak_centered(self, wvf):
        psf = pupil_to_psf(compute_pupil_function(wvf)[0])
        assert np.unravel_index(np.argmax(psf), psf.shape) == (32, 32)

    def test_diffraction_limited_symmetric(self, wvf):
        psf = pupil_to_psf(compute_pupil_function(wvf)[0])
        # Mirror about the center sample (32, 32)
        core = psf[1:, 1:]
        assert np.allclose(core, core[::-1, ::-1])
        assert np.allclose(core, core.T)

    def test_unnormalized_total_energy(self, wvf):
        pupil = compute_pupil_function(wvf)[0]
        psf = pupil_to_psf(pupil, normalize=False)
        # Parseval: sum |FFT|^2 = N * sum |P|^2
        assert np.isclose(psf.sum(), pupil.size * np.sum(np.abs(pupil) ** 2))

    def test_aberration_lowers_peak(self, wvf):
        sharp = pupil_to_psf(compute_pupil_function(wvf)[0])
        wvf.set_zernike_coefficient(ZernikeMode.SPHERICAL, 0.2)
        blurred = pupil_to_psf(compute_pupil_function(wvf)[0])
        assert blurred.max() < sharp.max()

    def test_zero_pupil_stays_zero(self):
        psf = pupil_to_psf(np.zeros((8, 8), dtype=complex))
        assert np.all(psf == 0)


class TestComputePsf:
    """PSF caching driven by the staleness flags."""

    def test_computes_pupil_first(self, wvf):
        psfs = compute_psf(wvf)
        assert len(psfs) == 1
        assert wvf.cache.pupil_function_computations == 1
        assert wvf.cache.psf_computations == 1
        assert not wvf.cache.is_psf_stale()
        assert not wvf.cache.is_pupil_function_stale()

    def test_reuses_fresh_pupil(self, wvf):
        compute_pupil_function(wvf)
        compute_psf(wvf)
        assert wvf.cache.pupil_function_computations == 1

    def test_second_call_is_cache_hit(self, wvf):
        first = compute_psf(wvf)
        second = compute_psf(wvf)
        assert second[0] is first[0]
        assert wvf.cache.psf_computations == 1

    def test_mutation_recomputes_both(self, wvf):
        before = compute_psf(wvf)[0]
        wvf.set_zernike_coefficient(ZernikeMode.ASTIG_VERTICAL, 0.1)
        after = compute_psf(wvf)[0]
        assert wvf.cache.pupil_function_computations == 2
        assert wvf.cache.psf_computations == 2
        assert not np.allclose(before, after)

    def test_pupil_recompute_makes_psf_stale(self, wvf):
        compute_psf(wvf)
        wvf.calc_pupil_mm = 2.0
        compute_pupil_function(wvf)
        assert wvf.cache.is_psf_stale()
        compute_psf(wvf)
        assert wvf.cache.psf_computations == 2

    def test_disabled_sce_warning_points_at_caller(self, wvf):
        wvf.wavelengths_nm = [450.0, 550.0]
        with pytest.warns(DomainWarning) as record:
            compute_psf(wvf)
        assert len(record) == 1
        assert record[0].filename == __file__

    def test_cached_psf_is_read_only(self, wvf):
        psf = compute_psf(wvf)[0]
        with pytest.raises(ValueError):
            psf[0, 0] = 1.0

    def test_one_psf_per_wavelength(self, wvf):
        wvf.wavelengths_nm = [450.0, 550.0, 650.0]
        psfs = compute_psf(wvf)
        assert len(psfs) == 3
        for psf in psfs:
            assert np.isclose(psf.sum(), 1.0)


class TestAngularSampling:
    """PSF sample spacing."""

    def test_constant_across_wavelengths(self, wvf):
        wvf.wavelengths_nm = [450.0, 550.0, 650.0]
        spacing = [psf_angular_sampling_arcmin(wvf, i) for i in range(3)]
        assert np.allclose(spacing, spacing[0])

    def test_value(self, wvf):
        expected = (180 * 60 / np.pi) * 550e-6 / 16.212
        assert np.isclose(psf_angular_sampling_arcmin(wvf), expected)
