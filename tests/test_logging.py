import io
from battlesim.core.logging import Logger


def test_threshold_and_bound_context():
    buf = io.StringIO()
    log = Logger("INFO", stream=buf)
    log.debug("Hidden")
    child = log.bind(battle="b1")
    child.info("MoveResolved", damage=37)
    text = buf.getvalue()
    assert "Hidden" not in text
    assert "[INFO] MoveResolved battle=b1 damage=37" in text
