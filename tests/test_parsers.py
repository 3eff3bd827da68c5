"""Tests for the metric parsers."""

import pytest
from fakes import GPU_OUTPUT, HELPER_OUTPUT, PMSET_OUTPUT, SMC_OUTPUT, SWAP_OUTPUT

from metserve.models import GPUStats, MemoryPressure, ThermalPressure
from metserve.parsers import (
    DieTemperatures,
    apply_sensor_fallback,
    classify_pressure,
    extract_number,
    parse_die_temperatures,
    parse_gpu,
    parse_memory,
    parse_sensor_readings,
    parse_swap_used_gb,
    parse_thermal_limits,
    parse_thermal_pressure,
    pattern,
)

GARBAGE_INPUTS = [
    "",
    "   \n\t",
    "powermetrics: must be invoked as the superuser",
    "{not json",
    "GPU Power: lots mW",
    "\x00\xff binary � junk",
]


class TestExtractNumber:
    """Tests for ordered pattern extraction."""

    def test_first_matching_pattern_wins(self):
        patterns = (pattern(r"alpha:\s*([0-9.]+)"), pattern(r"beta:\s*([0-9.]+)"))
        assert extract_number("beta: 2\nalpha: 1", patterns) == 1.0

    def test_falls_through_to_later_pattern(self):
        patterns = (pattern(r"alpha:\s*([0-9.]+)"), pattern(r"beta:\s*([0-9.]+)"))
        assert extract_number("beta: 2", patterns) == 2.0

    def test_case_insensitive(self):
        assert extract_number("ALPHA: 3", (pattern(r"alpha:\s*([0-9.]+)"),)) == 3.0

    def test_normalizer_applied(self):
        patterns = (pattern(r"size:\s*([0-9.]+)", lambda v: v * 2),)
        assert extract_number("size: 4", patterns) == 8.0

    def test_unparseable_capture_tries_next_pattern(self):
        patterns = (pattern(r"alpha:\s*([0-9.]+)"), pattern(r"beta:\s*([0-9.]+)"))
        assert extract_number("alpha: 1.2.3 beta: 7", patterns) == 7.0

    def test_no_match_returns_none(self):
        assert extract_number("nothing here", (pattern(r"alpha:\s*([0-9.]+)"),)) is None


class TestParseGpu:
    """Tests for the powermetrics gpu_power parser."""

    def test_parses_sample_output(self):
        stats = parse_gpu(GPU_OUTPUT)
        assert stats == GPUStats(freq_mhz=1398.0, active_pct=97.52, idle_pct=1.48, power_mw=20512.0)

    def test_permission_error_yields_all_null(self):
        stats = parse_gpu("powermetrics must be invoked as the superuser\n")
        assert stats.model_dump() == {
            "freq_mhz": None,
            "active_pct": None,
            "idle_pct": None,
            "power_mw": None,
        }

    def test_partial_output(self):
        stats = parse_gpu("GPU Power: 35 mW\n")
        assert stats.power_mw == 35.0
        assert stats.freq_mhz is None

    @pytest.mark.parametrize("text", GARBAGE_INPUTS)
    def test_never_omits_keys(self, text):
        assert set(parse_gpu(text).model_dump()) == {"freq_mhz", "active_pct", "idle_pct", "power_mw"}


class TestClassifyPressure:
    """Tests for the memory pressure classifier."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("System memory pressure: CRITICAL", MemoryPressure.RED),
            ("level is red", MemoryPressure.RED),
            ("memory pressure WARNING", MemoryPressure.YELLOW),
            ("state: yellow", MemoryPressure.YELLOW),
            ("The system is Normal", MemoryPressure.GREEN),
            ("green", MemoryPressure.GREEN),
            ("System-wide memory free percentage: 77%", MemoryPressure.GREEN),
            ("System-wide memory free percentage: 64%", MemoryPressure.GREEN),
            ("", MemoryPressure.UNKNOWN),
            ("command not found", MemoryPressure.UNKNOWN),
        ],
    )
    def test_classification(self, text, expected):
        assert classify_pressure(text) == expected

    def test_critical_beats_normal(self):
        assert classify_pressure("Normal operation\nthen: critical") == MemoryPressure.RED

    def test_warning_beats_green(self):
        assert classify_pressure("green earlier, now warn") == MemoryPressure.YELLOW


class TestParseSwap:
    """Tests for the vm.swapusage parser."""

    def test_gigabytes(self):
        assert parse_swap_used_gb("used = 2.50G") == 2.5

    def test_megabytes_converted(self):
        assert parse_swap_used_gb("used = 512M") == 0.5

    def test_sysctl_output(self):
        assert parse_swap_used_gb(SWAP_OUTPUT) == 0.5

    def test_no_swap_in_use(self):
        assert parse_swap_used_gb("total = 0.00M  used = 0.00M  free = 0.00M") == 0.0

    def test_missing_token(self):
        assert parse_swap_used_gb("sysctl: unknown oid 'vm.swapusage'") is None

    def test_unknown_unit(self):
        assert parse_swap_used_gb("used = 12K") is None

    def test_parse_memory_uses_each_source(self):
        stats = parse_memory("memory free percentage: 50%", "used = 1.00G")
        assert stats.pressure == MemoryPressure.GREEN
        assert stats.swap_gb == 1.0


class TestThermalLimits:
    """Tests for the pmset / powermetrics thermal limit parser."""

    def test_explicit_limits(self):
        text = (
            "CPU_Scheduler_Limit \t= 100\n"
            "CPU_Available_CPUs \t= 10\n"
            "CPU_Speed_Limit \t= 85\n"
            "GPU_Speed_Limit = 70\n"
        )
        limits = parse_thermal_limits(text)
        assert limits.cpu_speed_limit_pct == 85.0
        assert limits.gpu_speed_limit_pct == 70.0

    def test_nothing_recorded_defaults_to_unthrottled(self):
        limits = parse_thermal_limits(PMSET_OUTPUT)
        assert limits.cpu_speed_limit_pct == 100.0
        assert limits.gpu_speed_limit_pct == 100.0
        assert limits.thermal_pressure == ThermalPressure.NOMINAL

    def test_cpu_limit_stays_null_without_marker(self):
        limits = parse_thermal_limits("")
        assert limits.cpu_speed_limit_pct is None
        assert limits.gpu_speed_limit_pct == 100.0
        assert limits.thermal_pressure == ThermalPressure.UNKNOWN

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("ThermalPressure = Heavy", ThermalPressure.HEAVY),
            ("Thermal Pressure: moderate", ThermalPressure.MODERATE),
            ("Current pressure level: Critical", ThermalPressure.CRITICAL),
            ("Current pressure level: Nominal", ThermalPressure.NOMINAL),
        ],
    )
    def test_pressure_phrasings(self, text, expected):
        assert parse_thermal_pressure(text) == expected

    def test_phrase_beats_no_event_marker(self):
        text = PMSET_OUTPUT + "\nCurrent pressure level: Moderate\n"
        assert parse_thermal_pressure(text) == ThermalPressure.MODERATE

    def test_no_thermal_event_defaults_to_nominal(self):
        text = "Note: No thermal warning level has been recorded\n"
        assert parse_thermal_pressure(text) == ThermalPressure.NOMINAL

    def test_unrecognized_word_is_unknown(self):
        assert parse_thermal_pressure("Thermal Pressure: Sweltering") == ThermalPressure.UNKNOWN


class TestDieTemperatures:
    """Tests for the powermetrics smc die temperature parser."""

    def test_die_labels(self):
        temps = parse_die_temperatures(SMC_OUTPUT)
        assert temps == DieTemperatures(cpu_temp_c=52.31, gpu_temp_c=48.10, soc_temp_c=50.0)

    def test_alternate_labels(self):
        text = "CPU temperature: 60.5 C\nGPU temperature: 55 C\nPMU die temperature: 47.0 C\n"
        temps = parse_die_temperatures(text)
        assert temps == DieTemperatures(cpu_temp_c=60.5, gpu_temp_c=55.0, soc_temp_c=47.0)

    def test_die_label_preferred_over_plain(self):
        text = "CPU temperature: 10 C\nCPU die temperature: 20 C\n"
        assert parse_die_temperatures(text).cpu_temp_c == 20.0

    def test_absent_is_empty(self):
        temps = parse_die_temperatures("**** Thermal pressure ****\n")
        assert temps.is_empty


class TestSensorFallback:
    """Tests for the sensor helper fallback."""

    def test_readings_parsed(self):
        assert parse_sensor_readings(HELPER_OUTPUT) == {"PMU tdie1": 41.5, "PMU tdie2": 44.25}

    @pytest.mark.parametrize("text", ["", "not json", "[1, 2]", '{"a": "hot"}', '{"a": {"b": 1}}'])
    def test_malformed_readings_are_empty(self, text):
        assert parse_sensor_readings(text) == {}

    def test_max_assigned_to_every_region(self):
        temps = apply_sensor_fallback(DieTemperatures(), True, '{"a":10,"b":22.5}')
        assert temps == DieTemperatures(cpu_temp_c=22.5, gpu_temp_c=22.5, soc_temp_c=22.5)

    def test_not_applied_when_helper_failed(self):
        temps = apply_sensor_fallback(DieTemperatures(), False, '{"a":10,"b":22.5}')
        assert temps.is_empty

    def test_not_applied_when_primary_has_a_value(self):
        primary = DieTemperatures(gpu_temp_c=40.0)
        assert apply_sensor_fallback(primary, True, '{"a":90}') == primary

    def test_malformed_output_leaves_nulls(self):
        temps = apply_sensor_fallback(DieTemperatures(), True, "debug: starting\n{}")
        assert temps.is_empty

    def test_empty_object_leaves_nulls(self):
        assert apply_sensor_fallback(DieTemperatures(), True, "{}").is_empty
