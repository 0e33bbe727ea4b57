"""
Intake form layout.

The intake sheet is one wide table shared by four forms. Every column the
importer reads is declared here once, by name, so the rest of the code never
addresses a raw position.
"""

# Intent prompts (column 3), compared trimmed and lowercased
FOUNDER_INTENT = "i am a founder and i want to take my startup to the moon."
FOUNDER_REFERRAL_INTENT = "i know an incredible founder, someone moonstone should get to know."
SEARCHER_INTENT = (
    "i am an entrepreneur and i want to be a searcher for moonstone's search fund "
    "(or apply as an intern)."
)
SEARCHER_REFERRAL_INTENT = (
    "i know an incredible entrepreneur, that would be a great searcher for "
    "moonstone's search fund."
)


class CommonColumns:
    SUBMITTED_AT = 2
    INTENT = 3
    # ABY, the last column of the default sheet range
    LAST = 752


class FounderReferralColumns:
    REFERRER_NAME = 4
    REFERRER_EMAIL = 5
    REFERRER_PHONE = 6
    REFERRER_LINKEDIN = 7
    FOUNDER_CONTACT = 8
    STARTUP_NAME = 9
    FOUNDER_EMAIL = 10
    COMPANY_WEBSITE = 11
    SHAREHOLDINGS = 12
    QUESTIONS = [13, 14, 15, 16]
    ANONYMOUS = 17


class SearcherReferralColumns:
    REFERRER_NAME = 18
    REFERRER_EMAIL = 19
    REFERRER_PHONE = 20
    REFERRER_LINKEDIN = 21
    SEARCHER_NAME = 22
    SEARCHER_EMAIL = 23
    SEARCHER_LINKEDIN = 24


class SearcherColumns:
    NAME = 37
    EMAIL = 38
    PHONE = 39
    LINKEDIN = 40
    NICKNAME = 41
    ROLE = 42
    LOCATION = 43
    CV = 44
    START_OF_AVAILABILITY = 47
    TOUCHPOINT_WINDOW = 48
    COMPLETION_FIELDS = list(range(37, 66))


class FounderColumns:
    FOUNDER_NAME = 69
    FOUNDER_EMAIL = 70
    FOUNDER_PHONE = 71
    FOUNDER_LINKEDIN = 72
    STARTUP_NAME = 73
    COMPANY_WEBSITE = 74
    DECK = 75
    BUSINESS_MODEL = 76
    FOUNDED_IN = 77
    LOCATION = 78
    VALUATION = 102
    FUNDING_STAGE = 103
    PRIORITY_RANKING = 105
    COMPLETION_FIELDS = list(range(66, 116))

    # Team members: count in col 118, each member adds 11 cols starting at 119
    TEAM_MEMBER_COUNT = 118
    TEAM_MEMBER_START = 119
    TEAM_MEMBER_WIDTH = 11
    MAX_TEAM_MEMBERS = (CommonColumns.LAST - TEAM_MEMBER_START + 1) // TEAM_MEMBER_WIDTH


# Question groups: section title -> column indices
REFERRAL_SECTIONS = {
    "BASICS": [25, 26, 27, 28],
    "THE SEARCHER'S MIND: PROBLEM SOLVING, PRIORITIZATION & PRESSURE": [29, 30],
    "AGI-PROOFING THE FUTURE: AI LEVERAGE IN ACTION": [31, 32, 33],
    "THE MOONSTONE DNA: TRUST, CONFLICT, AND STRATEGIC LEADERSHIP": [34, 35, 36],
}

SEARCHER_SECTIONS = {
    "BASICS": [45, 46, 47, 48],
    "YOUR MIND: PROBLEM SOLVING, PRIORITIZATION & PRESSURE": [49, 50, 51, 52],
    "AI LEVERAGE IN ACTION: PREPARING FOR THE AGI ECONOMY": [53, 54, 55, 56, 57],
    "THE MOONSTONE DNA: TRUST, CONFLICT, STRATEGIC LEADERSHIP, NETWORK": [
        58, 59, 60, 61, 62, 63, 64, 65,
    ],
}

FOUNDER_SECTIONS = {
    "BASICS": [79, 80, 81, 82, 83, 84],
    "FINANCIALS": [87, 88, 95, 96, 97],
    "CHALLENGES & PRIORITIES": [98, 99, 100, 101, 103],
    "HR": [106, 107, 108, 109, 110, 111, 112],
    "EXIT": [113, 114, 115, 116, 117],
}

REFERRAL_INSIGHT_TITLE = "REFERRAL INSIGHT"
TEAM_INSIGHTS_TITLE = "TEAM-INSIGHTS"
FORM_TOGGLE_TITLE = "Form"
TEAM_INPUTS_TITLE = "Team Inputs"
ASSESSMENT_NOTES_TITLE = "Assessment Notes"
NO_RESPONSE = "No response"

# Short labels for question toggles. Columns without a label fall back to "Question <n>".
QUESTION_LABELS = {
    13: "How do you know the founder? What is your relationship?",
    14: "An episode where the founder showed independent thinking and outstanding performance",
    15: "The most ambitious person in your first-degree network",
    16: "Where the founder outperforms this person",
    25: "How do you know them? What is your relationship?",
    26: "Are they a previous founder/entrepreneur?",
    27: "If yes, of what?",
    28: "Prefer to stay anonymous if we reach out?",
    29: "A problem no one else could tackle",
    30: "A decision under time pressure and incomplete information",
    31: "A project sped up with an AI tool",
    32: "An AI tool they introduced you to",
    33: "Their most clever use of AI",
    34: "Challenging someone on a sensitive issue",
    35: "Asserting a new direction in a high-stakes moment",
    36: "Helping stakeholders realign after a conflict",
    45: "Are you a previous founder/entrepreneur?",
    46: "If yes, tell us more.",
    47: "When could you start the training program?",
    48: "Preferred daily touchpoint window",
    49: "Colliding urgent deadlines",
    50: "Bringing an off-track project back",
    51: "A problem no one else could tackle",
    52: "A decision under time pressure and incomplete information",
    53: "Value AI tools bring to a business",
    54: "A project sped up with an AI tool",
    55: "An AI tool you are passionate about",
    56: "Your most clever use of AI",
    57: "First three steps to make a company AGI-resilient",
    58: "Challenging someone on a sensitive issue",
    59: "Shifting low team morale",
    60: "Asserting a new direction in a high-stakes moment",
    61: "Helping stakeholders realign after a conflict",
    62: "People who would lend you their social capital (out of 10)",
    63: "Raising €150,000 in 90 days",
    64: "Earning the trust of a senior business owner",
    65: "Securing buy-in for a bold project",
    79: "Why is it the best location?",
    80: "Your vision of the market",
    81: "The problem you solve and how",
    82: "What becomes achievable in 10 years thanks to you",
    83: "Unique selling proposition",
    84: "Competitors and what you understand that they don't",
    87: "Current monthly revenue",
    88: "Current monthly burn",
    95: "Round size",
    96: "Use of funds",
    97: "Committed investors",
    98: "Biggest challenge today",
    99: "Biggest challenge in the next 18 months",
    100: "What would make you fail",
    101: "What keeps you up at night",
    103: "What next stage is this round funding?",
    106: "Team members full-time so far and today",
    107: "Key hires planned",
    108: "When will they join your team?",
    109: "How you attract talent",
    110: "Equity split among founders",
    111: "Employee stock option plan",
    112: "Advisors",
    113: "Exit expectations",
    114: "Potential acquirers",
    115: "Time horizon to exit",
    116: "Comparable exits",
    117: "Anything else we should know",
}

TEAM_MEMBER_TITLE = "TEAM MEMBER {}"

# First columns of each member group; members after the first show them as a table
TEAM_CONTACT_LABELS = ["Contact info", "Position", "Email", "Phone number", "LinkedIn"]

TEAM_MEMBER_LABELS = [
    *TEAM_CONTACT_LABELS,
    "Full-time since",
    "Equity",
    "Background",
    "Previous companies",
    "Education",
    "Why this team",
]

# Select vocabularies accepted by the Notion database
VALID_LOCATIONS = [
    "Northern Europe",
    "Western Europe",
    "Central Europe",
    "Eastern Europe",
    "Southern Europe",
    "North America",
    "Latin America",
    "Africa",
    "Asia",
]

VALID_VALUATIONS = [
    "< €5M",
    "€5M - €10M",
    "€11M - €15M",
    "€16M - €20M",
    "€21M - €25M",
    "> €26M",
]

VALID_FUNDING_STAGES = [
    "Pre-Seed",
    "Bridge to Seed",
    "Seed",
    "Bridge to Series A",
    "Series A",
    "Bridge to Series B",
    "Series B",
    "Bridge to Series C",
    "Series C",
    "Bridge to Series D",
    "Series D",
    "> Series D",
]

AVAILABILITY_OPTIONS = [
    "Morning (09:00–12:00)",
    "Early afternoon (12:00–15:00)",
    "Late afternoon (15:00–18:00)",
    "Evening (18:00–21:00)",
    "Late evening (21:00–23:00)",
    "I’m flexible / decide with the group",
]

PRIORITY_SLOTS = 6
UNMATCHED_STATUS = "⚠️ Unmatched Referral"


def question_label(index: int) -> str:
    return QUESTION_LABELS.get(index, f"Question {index}")


# Referral info tables: (row label, column)
FOUNDER_REFERRAL_TABLE = [
    ("Form filled out:", CommonColumns.SUBMITTED_AT),
    ("Name", FounderReferralColumns.REFERRER_NAME),
    ("Email", FounderReferralColumns.REFERRER_EMAIL),
    ("Phone Number", FounderReferralColumns.REFERRER_PHONE),
    ("LinkedIn", FounderReferralColumns.REFERRER_LINKEDIN),
    ("Founder's Contact Info", FounderReferralColumns.FOUNDER_CONTACT),
    ("Startup Name", FounderReferralColumns.STARTUP_NAME),
    ("Founder's Email", FounderReferralColumns.FOUNDER_EMAIL),
    ("Company Website", FounderReferralColumns.COMPANY_WEBSITE),
    ("# of startups you're a shareholder in", FounderReferralColumns.SHAREHOLDINGS),
    ("Anonymous if we reach out?", FounderReferralColumns.ANONYMOUS),
]

SEARCHER_REFERRAL_TABLE = [
    ("Form filled out:", CommonColumns.SUBMITTED_AT),
    ("Name", SearcherReferralColumns.REFERRER_NAME),
    ("Email", SearcherReferralColumns.REFERRER_EMAIL),
    ("Phone Number", SearcherReferralColumns.REFERRER_PHONE),
    ("LinkedIn", SearcherReferralColumns.REFERRER_LINKEDIN),
    ("Searcher Name", SearcherReferralColumns.SEARCHER_NAME),
    ("Searcher Email", SearcherReferralColumns.SEARCHER_EMAIL),
    ("Searcher LinkedIn", SearcherReferralColumns.SEARCHER_LINKEDIN),
]

FORM_INTRO = "Responses from the form are grouped here."
TEAM_INPUTS_INTRO = "Responses from the Moonstone team are grouped here."
DEAL_TABLE_LABELS = ["round size", "valuation", "moonstone ticket", "other investors"]
