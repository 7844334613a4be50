# =============================================================================
# core/models/theme.py - Theme Schemas
# =============================================================================
# These models define how a public page looks:
# - Theme: the theme as stored by the backend (every field optional)
# - ThemeUpdate: the theme sent on save, with the custom background invariant
# - ResolvedTheme: a fully populated theme used for rendering
#
# resolve_theme() is the single place where missing or unknown values are
# replaced by defaults. The dashboard preview and the public page both use it.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Sentinel meaning "the background is an uploaded image"
CUSTOM_BACKGROUND = "custom"

DEFAULT_PAGE_BACKGROUND = "bg-black"

# Preset swatches offered on the settings tab (value -> label)
PAGE_BACKGROUNDS: dict[str, str] = {
    "bg-black": "Black",
    "bg-zinc-900": "Dark Gray",
    "bg-purple-900": "Purple",
    "bg-blue-900": "Blue",
    "bg-gradient-to-br from-purple-900 to-blue-900": "Gradient",
    CUSTOM_BACKGROUND: "Custom",
}


class ButtonStyle(str, Enum):
    """Link button variants."""
    SOLID = "solid"
    OUTLINE = "outline"
    GRADIENT = "gradient"


class FontFamily(str, Enum):
    """Font families a page can use (values are CSS utility classes)."""
    INTER = "font-inter"
    POPPINS = "font-poppins"
    MONTSERRAT = "font-montserrat"
    ROBOTO = "font-roboto"
    OSWALD = "font-oswald"
    PLAYFAIR = "font-playfair"


FONT_LABELS: dict[FontFamily, tuple[str, str]] = {
    FontFamily.INTER: ("Inter", "Modern & Clean"),
    FontFamily.POPPINS: ("Poppins", "Friendly & Rounded"),
    FontFamily.MONTSERRAT: ("Montserrat", "Classic & Elegant"),
    FontFamily.ROBOTO: ("Roboto", "Neutral & Balanced"),
    FontFamily.OSWALD: ("Oswald", "Bold & Distinctive"),
    FontFamily.PLAYFAIR: ("Playfair", "Stylish & Refined"),
}

BUTTON_CLASSES: dict[ButtonStyle, str] = {
    ButtonStyle.SOLID: "bg-purple-600 hover:bg-purple-700 text-white",
    ButtonStyle.OUTLINE: "bg-transparent border border-purple-600 text-purple-600 hover:bg-purple-600/10",
    ButtonStyle.GRADIENT: "bg-gradient-to-r from-purple-600 to-blue-600 hover:from-purple-700 hover:to-blue-700 text-white",
}


class Theme(BaseModel):
    """
    Theme settings as the backend returns them.

    Every field is optional and kept as a plain string so that an unknown
    value from the backend never breaks loading a profile.

    Example:
        {
            "pageBackground": "custom",
            "buttonStyle": "outline",
            "fontFamily": "font-roboto",
            "customBackground": "https://.../wallpaper-42-1700000000000.jpg"
        }
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page_background: str | None = Field(default=None, alias="pageBackground")
    button_style: str | None = Field(default=None, alias="buttonStyle")
    font_family: str | None = Field(default=None, alias="fontFamily")
    custom_background: str | None = Field(default=None, alias="customBackground")


class ThemeUpdate(BaseModel):
    """
    Theme sent to PUT /me/ when the settings tab is saved.

    Invariant: a custom background always comes with its image URL, and
    customBackground is null for every preset background.
    """

    model_config = ConfigDict(populate_by_name=True)

    page_background: str = Field(default=DEFAULT_PAGE_BACKGROUND, alias="pageBackground")
    button_style: ButtonStyle = Field(default=ButtonStyle.SOLID, alias="buttonStyle")
    font_family: FontFamily = Field(default=FontFamily.INTER, alias="fontFamily")
    custom_background: str | None = Field(default=None, alias="customBackground")

    @model_validator(mode="after")
    def check_custom_background(self) -> "ThemeUpdate":
        if self.page_background == CUSTOM_BACKGROUND:
            if not self.custom_background:
                raise ValueError("customBackground is required when pageBackground is 'custom'")
        else:
            self.custom_background = None
        return self

    def to_payload(self) -> dict:
        """Serialize with the backend's camelCase names."""
        return self.model_dump(mode="json", by_alias=True)


class ResolvedTheme(BaseModel):
    """
    Fully populated theme, ready for rendering.

    Built only by resolve_theme(); templates read the computed helpers
    instead of repeating the background/button rules.
    """

    model_config = ConfigDict(frozen=True)

    page_background: str = DEFAULT_PAGE_BACKGROUND
    button_style: ButtonStyle = ButtonStyle.SOLID
    font_family: FontFamily = FontFamily.INTER
    custom_background: str | None = None

    @property
    def is_custom(self) -> bool:
        return self.page_background == CUSTOM_BACKGROUND

    @property
    def uses_background_image(self) -> bool:
        """True when the page shows an uploaded wallpaper."""
        return self.is_custom and bool(self.custom_background)

    @property
    def background_class(self) -> str:
        """Swatch class for the page (empty for the custom sentinel)."""
        return "" if self.is_custom else self.page_background

    @property
    def background_style(self) -> str:
        """Inline CSS for a custom wallpaper, empty otherwise."""
        if not self.uses_background_image:
            return ""
        return (
            f"background-image: url('{self.custom_background}'); "
            "background-size: cover; "
            "background-position: center; "
            "background-repeat: no-repeat;"
        )

    @property
    def overlay_class(self) -> str:
        # Darken wallpapers so the text stays readable
        if self.is_custom:
            return "bg-black/60"
        return "opacity-30 bg-[radial-gradient(circle_at_center,rgba(255,255,255,0.1),transparent)]"

    @property
    def button_class(self) -> str:
        return BUTTON_CLASSES[self.button_style]


def _coerce_enum(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


def resolve_theme(theme: Theme | dict | None) -> ResolvedTheme:
    """
    Fill in theme defaults.

    Missing or empty fields fall back to a black background, solid buttons
    and the Inter font. Unknown button styles and fonts fall back the same way.

    Args:
        theme: Theme model, raw backend dict, or None

    Returns:
        ResolvedTheme with every field set
    """
    if theme is None:
        return ResolvedTheme()
    if isinstance(theme, dict):
        theme = Theme.model_validate(theme)

    return ResolvedTheme(
        page_background=theme.page_background or DEFAULT_PAGE_BACKGROUND,
        button_style=_coerce_enum(ButtonStyle, theme.button_style, ButtonStyle.SOLID),
        font_family=_coerce_enum(FontFamily, theme.font_family, FontFamily.INTER),
        custom_background=theme.custom_background or None,
    )
