"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def _positive_ints(section: str, params: dict[str, Any], names: tuple[str, ...]) -> list[ValidationError]:
        errors = []
        for name in names:
            if name in params:
                value = params[name]
                if not _is_int(value) or value <= 0:
                    errors.append(ValidationError(
                        field=f"{section}.{name}",
                        message="Must be a positive integer",
                        value=value
                    ))
        return errors

    @staticmethod
    def _positive_numbers(section: str, params: dict[str, Any], names: tuple[str, ...]) -> list[ValidationError]:
        errors = []
        for name in names:
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=f"{section}.{name}",
                        message="Must be a positive number",
                        value=value
                    ))
        return errors

    @staticmethod
    def _fractions(section: str, params: dict[str, Any], names: tuple[str, ...]) -> list[ValidationError]:
        errors = []
        for name in names:
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0 or value > 1:
                    errors.append(ValidationError(
                        field=f"{section}.{name}",
                        message="Must be a positive number between 0 and 1",
                        value=value
                    ))
        return errors

    @staticmethod
    def _confidences(section: str, params: dict[str, Any], names: tuple[str, ...]) -> list[ValidationError]:
        errors = []
        for name in names:
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0 or value > 100:
                    errors.append(ValidationError(
                        field=f"{section}.{name}",
                        message="Must be a number between 0 and 100",
                        value=value
                    ))
        return errors

    @staticmethod
    def validate_double_pattern_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate double top/bottom parameters."""
        errors = ConfigValidator._positive_ints(
            "double_pattern", params, ("min_candles", "window", "min_distance", "min_separation"))
        errors.extend(ConfigValidator._fractions(
            "double_pattern", params, ("max_price_diff", "retracement")))
        errors.extend(ConfigValidator._confidences(
            "double_pattern", params, ("base_confidence", "confidence_range")))

        # The scan window must fit inside the required series
        window = params.get("window")
        min_candles = params.get("min_candles")
        if _is_int(window) and _is_int(min_candles) and window > min_candles:
            errors.append(ValidationError(
                field="double_pattern.window",
                message="Must not exceed min_candles",
                value=window
            ))

        return errors

    @staticmethod
    def validate_head_shoulders_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate head and shoulders parameters."""
        errors = ConfigValidator._positive_ints(
            "head_shoulders", params, ("min_candles", "window", "min_distance"))
        errors.extend(ConfigValidator._fractions("head_shoulders", params, ("max_shoulder_diff",)))
        errors.extend(ConfigValidator._confidences(
            "head_shoulders", params, ("base_confidence", "confidence_range")))
        return errors

    @staticmethod
    def validate_triangle_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate ascending triangle parameters."""
        errors = ConfigValidator._positive_ints(
            "triangle", params, ("min_candles", "window", "min_touches"))
        errors.extend(ConfigValidator._fractions(
            "triangle", params, ("resistance_tolerance", "target_ratio")))
        errors.extend(ConfigValidator._confidences("triangle", params, ("confidence",)))
        return errors

    @staticmethod
    def validate_key_level_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate support/resistance level parameters."""
        errors = ConfigValidator._positive_ints(
            "key_levels", params, ("min_candles", "swing_window", "max_levels"))
        errors.extend(ConfigValidator._fractions("key_levels", params, ("group_tolerance",)))
        return errors

    @staticmethod
    def validate_structure_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate market structure parameters."""
        errors = ConfigValidator._positive_ints(
            "structure", params, ("atr_period", "min_points", "retest_pips"))
        errors.extend(ConfigValidator._positive_numbers("structure", params, ("min_swing_atr",)))
        return errors

    @staticmethod
    def validate_zone_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate support/resistance zone parameters."""
        errors = ConfigValidator._positive_ints("zones", params, (
            "max_width_pips", "optimal_width_pips", "min_touches",
            "max_strength", "overlap_pips", "overlap_bonus"))

        max_width = params.get("max_width_pips")
        optimal_width = params.get("optimal_width_pips")
        if _is_int(max_width) and _is_int(optimal_width) and optimal_width > max_width:
            errors.append(ValidationError(
                field="zones.optimal_width_pips",
                message="Must not exceed max_width_pips",
                value=optimal_width
            ))

        return errors

    @staticmethod
    def validate_engine_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate engine parameters."""
        return ConfigValidator._positive_ints("engine", params, ("min_candles",))

    @staticmethod
    def validate_risk_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate stop loss / take profit parameters."""
        errors = ConfigValidator._positive_ints(
            "risk", params, ("min_stop_pips", "min_take_profit_pips"))

        errors.extend(ConfigValidator._positive_numbers(
            "risk", params, ("atr_multiplier", "reward_ratio")))
        return errors

    @staticmethod
    def validate_session_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trading week boundaries."""
        errors = []

        for name in ("close_weekday", "open_weekday"):
            if name in params:
                value = params[name]
                if not _is_int(value) or not 0 <= value <= 6:
                    errors.append(ValidationError(
                        field=f"session.{name}",
                        message="Must be an integer weekday between 0 (Monday) and 6 (Sunday)",
                        value=value
                    ))

        for name in ("close_hour", "open_hour"):
            if name in params:
                value = params[name]
                if not _is_int(value) or not 0 <= value <= 23:
                    errors.append(ValidationError(
                        field=f"session.{name}",
                        message="Must be an integer hour between 0 and 23",
                        value=value
                    ))

        errors.extend(ConfigValidator._positive_ints("session", params, ("stale_after_minutes",)))
        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        validators = {
            "double_pattern": ConfigValidator.validate_double_pattern_params,
            "head_shoulders": ConfigValidator.validate_head_shoulders_params,
            "triangle": ConfigValidator.validate_triangle_params,
            "key_levels": ConfigValidator.validate_key_level_params,
            "structure": ConfigValidator.validate_structure_params,
            "zones": ConfigValidator.validate_zone_params,
            "risk": ConfigValidator.validate_risk_params,
            "session": ConfigValidator.validate_session_params,
            "engine": ConfigValidator.validate_engine_params,
        }

        for section, validate in validators.items():
            if section not in config:
                continue
            params = config[section]
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping of parameters",
                    value=params
                ))
                continue
            errors.extend(validate(params))

        return errors
