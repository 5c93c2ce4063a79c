from typing import List, Optional


class InvariantViolation(ValueError):
    """A structural rule of a section or its content blob was broken."""


class ContentValidationError(InvariantViolation):
    """An entry is missing required fields of its section template."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Content is invalid")


class SectionError(ValueError):
    pass


class UnknownSectionType(SectionError):
    def __init__(self, section_type: Optional[str]):
        self.section_type = section_type
        super().__init__(f"Unknown section type: {section_type}")


class MissingEntries(SectionError):
    def __init__(self):
        super().__init__("Section has no entries")


class EntryNotFound(SectionError):
    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"Entry with ID {entry_id} not found")


class StaleSection(SectionError):
    def __init__(self, message: str = "Conflict detected. Section has been modified."):
        super().__init__(message)


class SectionNotFound(SectionError):
    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(f"Section {section_id} not found")
