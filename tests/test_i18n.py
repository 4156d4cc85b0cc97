import logging

from beanbox import I18n, Translator


def test_tr_formats_template_without_catalog():
    assert I18n().tr("{0} cannot be created: {1}", "Mailer", "boom") == "Mailer cannot be created: boom"


def test_tr_uses_catalog_translation():
    i18n = I18n({"{0} cannot be created: {1}": "{0} kann nicht erstellt werden: {1}"})
    assert i18n.tr("{0} cannot be created: {1}", "Mailer", "boom") == "Mailer kann nicht erstellt werden: boom"


def test_tr_returns_template_when_arguments_are_missing(caplog):
    with caplog.at_level(logging.WARNING, logger="beanbox._i18n"):
        assert I18n().tr("{0} and {1}", "only one") == "{0} and {1}"
    assert "unable to format" in caplog.text


def test_i18n_is_a_translator():
    assert isinstance(I18n(), Translator)
