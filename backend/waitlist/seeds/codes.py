"""Registration codes loaded into empty pools at first startup.

Either pool can be replaced by a newline-separated file through
``REGISTRATION_CODES_FILE`` / ``LATE_REGISTRATION_CODES_FILE``.
"""

from __future__ import annotations

from pathlib import Path

STANDARD_CODES: tuple[str, ...] = (
    "021175", "032491", "006438", "011170", "005593", "014785", "014153", "009346",
    "007182", "007561", "018528", "009821", "014741", "017356", "005783", "010642",
    "011225", "010214", "004503", "019537", "023366", "010840", "011897", "012415",
    "020687", "015362", "021403", "008040", "031739", "016412", "003935", "017611",
    "009149", "005806", "007635", "012352", "012627", "030923", "007931", "012421",
    "017205", "011161", "010707", "015275", "017466", "007325", "007903", "013122",
    "016873", "023853", "012204", "006560", "009533", "012353", "001022", "006979",
    "017632", "022570", "017777", "014139", "005960", "005987", "009856", "015152",
    "008540", "009457", "011382", "010761", "021446", "005513", "011125", "011559",
    "008763", "035179", "018775", "013280", "011623", "031502", "008147", "025679",
    "029470", "009789", "026994", "026119", "029323", "024346", "009302", "007011",
    "014424", "013110", "021197", "029608", "021756", "026685", "024310", "026572",
    "012052", "016707", "023942", "029565", "012831", "020572", "005846", "030920",
    "009972", "030939", "015040", "009032", "010739", "017180", "013725", "007986",
    "017830", "006053", "012711", "015153", "021425", "027605", "019166", "022292",
    "025383", "021526", "008057", "021778", "007806", "016541", "009413", "015615",
    "008707", "015846", "018234", "010638", "011156", "017672", "016180", "007426",
    "021636", "007754", "007278", "013275", "007860", "020579", "011696", "018957",
    "009940", "015541", "026396", "015775", "026316", "034116", "005053", "008472",
    "026977", "023989", "027142", "031145", "005951", "011286", "012741", "007872",
    "006973", "025082", "007969", "025313", "018972", "010884", "012170", "012412",
    "031206", "007703", "015197", "015112", "017456", "014975", "011171", "008565",
    "011263", "011812", "005938", "007846", "022922", "008190", "023695", "013962",
    "005056", "006143", "011162", "009008", "020230", "007853", "017388", "013481",
    "013907", "008855", "010827", "013493", "010121", "005069", "012121", "021224",
    "019798", "008691", "018923", "011497", "015140", "006339", "016439", "011440",
    "016160", "010240", "022682", "020822", "012576", "019326", "014881", "010345",
    "025366", "029728", "028293", "011919", "015131", "014322", "007388", "015383",
    "028727", "013937", "008992", "014493", "012128", "025187", "016339", "015766",
    "015895", "019163", "010057", "011265", "005755", "010694", "032888", "010803",
    "027357", "024995", "010975", "014011", "010696", "017278", "024255", "014014",
    "008259", "010926", "015090", "008526", "005317", "013399", "021907", "007235",
    "011451", "025952", "014260", "013990", "008257", "004302", "015329", "032764",
    "009364", "016496", "018514", "008704", "028944", "007064", "015816", "008176",
    "028667", "005796", "007869", "013583", "007883", "013942", "006054", "008530",
    "020973", "031968", "012361", "008818", "005101", "015221", "006743", "005928",
)

# Late codes are issued by the organisers close to the cutoff.
LATE_CODES: tuple[str, ...] = ()


def read_codes_file(path: str | Path) -> list[str]:
    """Return non-blank, non-comment lines of ``path`` stripped of whitespace."""
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")]


def load_pools(
    standard_file: str | Path | None = None,
    late_file: str | Path | None = None,
) -> tuple[list[str], list[str]]:
    """Resolve seed lists for both pools, preferring configured files."""
    standard = read_codes_file(standard_file) if standard_file else list(STANDARD_CODES)
    late = read_codes_file(late_file) if late_file else list(LATE_CODES)
    return standard, late
