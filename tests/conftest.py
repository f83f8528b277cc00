import pytest


BOE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Envelope xmlns="http://www.gesmes.org/xml/2002-08-01">
  <Cube SCODE="IUDBEDR" DESC="Official Bank Rate">
    <Cube TIME="2024-11-07" OBS_VALUE="4.75" OBS_CONF="N"/>
    <Cube TIME="2023-08-03" OBS_VALUE="5.25" OBS_CONF="N"/>
    <Cube TIME="2023-08-04" OBS_VALUE="5.25" OBS_CONF="N"/>
    <Cube TIME="2024-08-01" OBS_VALUE="5.00" OBS_CONF="N"/>
  </Cube>
</Envelope>
"""

NO_DATA_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Envelope xmlns="http://www.gesmes.org/xml/2002-08-01">
  <Header>
    <Sender>Bank of England</Sender>
    <Note>No observations for the requested period</Note>
  </Header>
</Envelope>
"""


def point(time: str, value: str, field: str = "TIME") -> dict:
    return {f"@{field}": time, "@OBS_VALUE": value}


@pytest.fixture
def boe_xml() -> str:
    return BOE_XML


@pytest.fixture
def no_data_xml() -> str:
    return NO_DATA_XML


@pytest.fixture
def simple_document() -> dict:
    """Point cubes directly inside the envelope."""
    return {
        "Envelope": {
            "Cube": [
                point("2024-02-01", "5.25"),
                point("2024-01-01", "5.25"),
                point("2024-03-01", "5.00"),
            ]
        }
    }


@pytest.fixture
def nested_document() -> dict:
    """Series cube three levels below the envelope."""
    return {
        "Envelope": {
            "Header": {"Sender": "Bank of England"},
            "Body": {
                "Data": {
                    "Cube": {
                        "@SCODE": "IUDBEDR",
                        "Cube": [
                            point("2020-03-11", "0.25"),
                            point("2020-03-19", "0.10"),
                            point("2021-12-16", "0.25"),
                        ],
                    }
                }
            },
        }
    }


@pytest.fixture
def sdmx_document() -> dict:
    """message/DataSet/Series/Obs dialect using TIME_PERIOD."""
    return {
        "Envelope": {
            "message": {
                "DataSet": {
                    "Series": {
                        "Obs": [
                            point("2024-01-01", "5.25", field="TIME_PERIOD"),
                            point("2024-08-01", "5.00", field="TIME_PERIOD"),
                        ]
                    }
                }
            }
        }
    }
