import logging

from driver_ltv.utils.logger import get_logger, print_summary, setup_logger


def test_module_loggers_share_namespace():
    setup_logger(log_level="DEBUG", enable_console=False)

    logger = get_logger("survival")

    assert logger.name == "driver_ltv.survival"
    assert logging.getLogger("driver_ltv").level == logging.DEBUG


def test_print_summary_formats_values(capsys):
    setup_logger(log_level="WARNING", enable_console=True, log_format="minimal")

    print_summary("RESULT", {'drivers': 2500, 'dlv': 1999.5, 'active': True})
    out = capsys.readouterr().out

    assert "RESULT" in out
    assert "drivers: 2,500" in out
    assert "dlv: 1,999.5000" in out
    assert "active: True" in out


def test_print_summary_silent_without_console(capsys):
    setup_logger(enable_console=False)

    print_summary("RESULT", {'drivers': 1})

    assert capsys.readouterr().out == ""


def test_file_logging(tmp_path):
    logger = setup_logger(log_level="INFO", enable_console=False, enable_file=True, log_dir=str(tmp_path))

    get_logger("ride_loader").info("loaded rides")
    for handler in logging.getLogger("driver_ltv").handlers:
        handler.flush()

    assert logger.log_file.startswith(str(tmp_path))
    with open(logger.log_file, encoding='utf-8') as f:
        assert "loaded rides" in f.read()
