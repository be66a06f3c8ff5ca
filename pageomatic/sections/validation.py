"""Section validation logic."""

from typing import Any

from pageomatic.exceptions import UnknownSectionTypeError, ValidationError
from pageomatic.sections.registry import is_known_type
from pageomatic.sections.types import MEDIA_TEXT_POSITIONS


class SectionValidator:
    """Validates section values according to the document rules."""

    # Validation constants
    ID_MAX_LENGTH = 255

    @staticmethod
    def validate_id(section_id: Any) -> None:
        """
        Validate section ID.

        Raises:
            ValidationError: If section_id is invalid
        """
        if not isinstance(section_id, str):
            raise ValidationError("Section ID must be a string", "id")
        if not section_id or not section_id.strip():
            raise ValidationError("Section ID cannot be empty", "id")
        if len(section_id) > SectionValidator.ID_MAX_LENGTH:
            raise ValidationError(
                f"Section ID must be at most {SectionValidator.ID_MAX_LENGTH} characters", "id"
            )

    @staticmethod
    def validate_json_compatible(value: Any, field: str = "content") -> None:
        """
        Ensure a payload only holds JSON types (dict, list, str, int, float, bool, None).

        Raises:
            ValidationError: If a non-JSON value or a non-string key is found
        """
        if value is None or isinstance(value, (str, bool, int, float)):
            return
        if isinstance(value, list):
            for item in value:
                SectionValidator.validate_json_compatible(item, field)
            return
        if isinstance(value, dict):
            for key, item in value.items():
                if not isinstance(key, str):
                    raise ValidationError(f"Keys in {field} must be strings", field)
                SectionValidator.validate_json_compatible(item, field)
            return
        raise ValidationError(
            f"Value of type {type(value).__name__} in {field} is not JSON-compatible", field
        )

    @staticmethod
    def validate_section(section: Any) -> None:
        """
        Validate one section value.

        Raises:
            ValidationError: If the section is malformed
            UnknownSectionTypeError: If the section type is not registered
        """
        if not isinstance(section, dict):
            raise ValidationError("Section must be a dictionary", "sections")
        SectionValidator.validate_id(section.get("id"))

        section_type = section.get("type")
        if not isinstance(section_type, str) or not is_known_type(section_type):
            raise UnknownSectionTypeError(str(section_type))

        if "visible" in section and not isinstance(section["visible"], bool):
            raise ValidationError("Section visible flag must be a boolean", "visible")

        expected_position = MEDIA_TEXT_POSITIONS.get(section_type)
        position = section.get("mediaPosition")
        if expected_position is not None and position is not None and position != expected_position:
            raise ValidationError(
                f"Section type {section_type} requires mediaPosition '{expected_position}'",
                "mediaPosition",
            )

        SectionValidator.validate_json_compatible(section, "sections")

    @staticmethod
    def validate_sections(sections: Any) -> None:
        """
        Validate an ordered list of sections, including id uniqueness.

        Raises:
            ValidationError: If the list or any section is invalid
        """
        if not isinstance(sections, list):
            raise ValidationError("Sections must be a list", "sections")
        seen: set[str] = set()
        for section in sections:
            SectionValidator.validate_section(section)
            if section["id"] in seen:
                raise ValidationError(f"Duplicate section ID '{section['id']}'", "id")
            seen.add(section["id"])
