"""Profile normalization: raw request data to a canonical Profile.

Coercion rules live on the Profile model itself; this module is the boundary
that turns pydantic's error list into a single ValidationError naming the
first offending field, so callers never see a partially validated profile.
"""

from collections.abc import Mapping
from typing import Any, Union

import pydantic
import structlog

from .exceptions import ValidationError
from .models.profile import Profile

logger = structlog.get_logger()


class ProfileNormalizer:
    """Validate and coerce raw profile input."""

    def normalize(self, raw: Union[Profile, Mapping[str, Any], None]) -> Profile:
        """Return a canonical Profile or raise ValidationError.

        Args:
            raw: A Profile (returned unchanged) or a mapping keyed by either
                camelCase or snake_case field names.

        Raises:
            ValidationError: Naming the first field, in declaration order,
                that is missing or invalid.
        """
        if isinstance(raw, Profile):
            return raw
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ValidationError(
                "Profile must be an object",
                field="profile",
                constraint="Must be a mapping of profile fields",
            )

        try:
            profile = Profile.model_validate(dict(raw))
        except pydantic.ValidationError as exc:
            raise self._translate(exc) from exc

        logger.debug(
            "profile_normalized",
            age=profile.age,
            risk_tolerance=profile.risk_tolerance.value,
            investment_goal=profile.investment_goal.value,
            time_horizon=profile.time_horizon.value,
        )
        return profile

    def merge(self, profile: Profile, changes: Mapping[str, Any]) -> Profile:
        """Apply field changes to a profile and re-validate the result."""
        data = profile.model_dump(by_alias=True)
        data.update(self._canonical_keys(changes))
        return self.normalize(data)

    @staticmethod
    def _canonical_keys(changes: Mapping[str, Any]) -> dict[str, Any]:
        # Changes may arrive in snake_case; profile dumps use aliases
        keyed = {}
        for key, value in changes.items():
            field = Profile.model_fields.get(key)
            keyed[field.alias if field and field.alias else key] = value
        return keyed

    @staticmethod
    def _translate(exc: pydantic.ValidationError) -> ValidationError:
        first = exc.errors()[0]
        loc = first.get("loc") or ("profile",)
        field = str(loc[0])
        model_field = Profile.model_fields.get(field)
        if model_field is not None and model_field.alias:
            field = model_field.alias

        if first.get("type") == "missing":
            message = f"Missing required field: {field}"
            value = None
        else:
            message = f"Invalid value for {field}"
            value = first.get("input")
            if not isinstance(value, (str, int, float, bool)):
                value = repr(value)

        constraint = first.get("msg", "").removeprefix("Value error, ")
        logger.info("profile_rejected", field=field, constraint=constraint)
        return ValidationError(
            message,
            field=field,
            value=value,
            constraint=constraint,
            details={"error_count": exc.error_count()},
        )


_default_normalizer = ProfileNormalizer()


def normalize_profile(raw: Union[Profile, Mapping[str, Any], None]) -> Profile:
    """Module-level shortcut for ProfileNormalizer().normalize()."""
    return _default_normalizer.normalize(raw)
