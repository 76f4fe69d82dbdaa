"""Shared fixtures for the workforce analytics test suite."""

import textwrap

import pytest

from src.roster_pipeline.cleaning import RosterCleaner


# ------------------------------------------------------------------
# Lightweight factories – cheap to construct, no I/O
# ------------------------------------------------------------------

@pytest.fixture(scope="module")
def cleaner():
    return RosterCleaner()


# ------------------------------------------------------------------
# CSV exports written to a temporary directory
# ------------------------------------------------------------------

POSITIONS_CSV = textwrap.dedent("""\
    positionId,positionTitle,classificationGroup,classificationLevel,classification,occupancyStatus,incumbentName,incumbentId,tenureType,startDate,endDate,languageProfile,city,province,region,branchCode,directorateCode,divisionCode,fundCentreCode,reportingToPositionId,fundingSource,fundingSunsetDate,salary,isCritical,isDoublebanked,ee_gender,ee_visibleMinority,ee_indigenous,ee_disability
    P001,Director General,EX,3,EX-03,Occupied,Alice Martin,E1,Indeterminate,2019-04-01,,BBB/BBB,Ottawa,ON,NCR,B1,D1,V1,FC1,,A-Base,,150000,true,false,Woman,false,false,false
    P002,Director,EX,1,,Occupied - Acting,Bob Tremblay,E2,Term,2023-01-15,2027-03-31,CBC/CBC,Montréal,QC,Quebec,B1,D1,V1,FC1,P001,Sunset,2027-03-31,120000,no,no,Man,true,false,false
    P003,Policy Analyst,EC,5,EC-05,VACANT,Former Person,E3,Term,2020-01-01,,,Ottawa,ON,NCR,B1,D1,V2,FC2,P002,a base,2026-03-31,90000,,,Woman,true,true,true
    P004,Senior Analyst,EC,6,EC-06,Occupied,Chloé Roy,E4,Casual,2024-06-01,2026-12-15T00:00:00,BBB/BBB,Toronto,ON,Ontario,B1,D2,V3,FC3,P002,program,,"$95,000",0,1,Woman,false,true,false
    P005,Clerk,CR,4,,Unknown Status,Dan Smith,E5,Indeterminate,,,,Halifax,NS,Atlantic,B2,D3,V4,FC4,,B-Base,,50000,false,false,,,,
    ,Orphan row,EC,2,,Occupied,Nobody,,,,,,,,,B2,D3,,,,,,,,,,,,
    P006,Program Officer,PM,4,PM-04,Occupied,Eve Chen,E6,Indeterminate,2018-09-01,,,"Halifax",NS,Atlantic,B2,D3,V4,FC4,P999,Unknown,,-10,Y,false,,false,false,false
""")

ORG_UNITS_CSV = textwrap.dedent("""\
    branchCode,branchName,directorateCode,directorateName,divisionCode,divisionName,fundCentreCode
    B1,Policy Branch,D1,Strategic Policy,V1,Planning,FC1
    B1,Policy Branch,D2,Research,V3,Analytics,FC3
    B2,Operations Branch,D3,Service Delivery,V4,Regional Ops,FC4
    B2,Operations Branch,D3,Service Delivery,V4,Regional Ops,FC4
""")

FINANCE_CSV = textwrap.dedent("""\
    directorateCode,directorateName,fundCentreCode,voteType,budget,forecast,actuals,commitments,freeBalance,fiscalYear
    D1,Strategic Policy,FC1,Salary,"275,000",270000,135000,0,5000,2026-27
    D1,Strategic Policy,FC1,O&M,50000,40000,10000,5000,5000,2026-27
    D2,Research,FC3,salary,200000,190000,95000,0,10000,2026-27
    D3,Service Delivery,FC4,Salary,$100000,100000,60000,0,0,2026-27
    D3,Service Delivery,FC4,Capital,25000,30000,20000,0,0,2026-27
    D3,Service Delivery,FC9,Grants,1000,1000,0,0,0,2026-27
""")


@pytest.fixture
def roster_dir(tmp_path):
    """Temporary directory holding a small positions/org-units/finance export."""
    (tmp_path / "positions.csv").write_text(POSITIONS_CSV, encoding="utf-8")
    (tmp_path / "org_units.csv").write_text(ORG_UNITS_CSV, encoding="utf-8")
    (tmp_path / "finance.csv").write_text(FINANCE_CSV, encoding="utf-8")
    return tmp_path
