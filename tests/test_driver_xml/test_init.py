"""Test module for driver_xml package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import driver_xml

    # Assert
    assert driver_xml is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import driver_xml

    # Assert
    assert isinstance(driver_xml.__version__, str)
    assert driver_xml.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import driver_xml

    # Assert
    assert driver_xml.__author__ == "driver-xml developers"


def test_package_all_exports() -> None:
    """Test that every name in __all__ is importable from the package."""
    # Arrange & Act
    import driver_xml

    # Assert
    for name in ["parse", "parse_string", "parse_file", "render", "DriverXmlParser"]:
        assert name in driver_xml.__all__
    for name in driver_xml.__all__:
        assert hasattr(driver_xml, name)


def test_level_one_parse_from_package() -> None:
    """Test the top-level parse function end to end."""
    # Arrange
    from driver_xml import XmlStatus, parse, render

    # Act
    result = parse(b"<a/>")

    # Assert
    assert result.status is XmlStatus.SUCCESS
    assert render(result.root.children[0]) == b"<a/>"
