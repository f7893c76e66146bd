from fieldservice.pages.public_form_page import ConfigurationError, PageState, PublicFormPage

__all__ = ["PublicFormPage", "PageState", "ConfigurationError"]
