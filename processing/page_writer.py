"""
Notion Page Writer

Projects reconciled records and unmatched placeholders onto Notion pages:
page properties plus the nested toggle content under "Form" and
"Team Inputs".

Content is written idempotently. Toggles are looked up by title before
being created, later duplicates are archived (the first one is kept), and
quotes and table rows are only rewritten when their text changed.
"""

from datetime import datetime, timezone
from typing import Optional

from config.form_layout import (
    ASSESSMENT_NOTES_TITLE,
    DEAL_TABLE_LABELS,
    FORM_INTRO,
    FORM_TOGGLE_TITLE,
    FOUNDER_REFERRAL_TABLE,
    FOUNDER_SECTIONS,
    NO_RESPONSE,
    PRIORITY_SLOTS,
    REFERRAL_INSIGHT_TITLE,
    REFERRAL_SECTIONS,
    SEARCHER_REFERRAL_TABLE,
    SEARCHER_SECTIONS,
    TEAM_CONTACT_LABELS,
    TEAM_INPUTS_INTRO,
    TEAM_INPUTS_TITLE,
    TEAM_INSIGHTS_TITLE,
    TEAM_MEMBER_LABELS,
    TEAM_MEMBER_TITLE,
    UNMATCHED_STATUS,
    CommonColumns,
    FounderColumns,
    FounderReferralColumns,
    SearcherColumns,
    question_label,
)
from config.logging import logger
from connectors import notion_blocks as blocks
from connectors.notion import NotionClient, PageDirectory
from processing.entity_resolution.resolver import team_member_columns, team_member_count
from processing.entity_resolution.unmatched import placeholder_title
from processing.models import (
    FormCategory,
    FormRow,
    ReconciledRecord,
    SubmissionKind,
    UnmatchedPlaceholder,
    UpsertOutcome,
)
from processing.validation import (
    coerce_intern_searcher,
    map_availability_option,
    parse_comma_list,
    validate_date,
    validate_email,
    validate_funding_stage,
    validate_location,
    validate_number,
    validate_phone,
    validate_url,
    validate_valuation,
)

# Status-style select each kind writes its tier label to
TIER_PROPERTY = {
    SubmissionKind.FOUNDER: "Status",
    SubmissionKind.SEARCHER: "SF Referrals",
}


# Property value builders (None means "leave the property alone")

def title_value(text: str) -> dict:
    return {"title": blocks.rich_text(text)}


def text_value(text: str) -> Optional[dict]:
    return {"rich_text": blocks.rich_text(text)} if text else None


def select_value(name: Optional[str]) -> Optional[dict]:
    return {"select": {"name": name}} if name else None


def multi_select_value(names: list[str]) -> Optional[dict]:
    return {"multi_select": [{"name": name} for name in names]} if names else None


def email_value(value: str) -> Optional[dict]:
    email = validate_email(value)
    return {"email": email} if email else None


def phone_value(value: str) -> Optional[dict]:
    phone = validate_phone(value)
    return {"phone_number": phone} if phone else None


def url_value(value: str) -> Optional[dict]:
    url = validate_url(value)
    return {"url": url} if url else None


def number_value(value) -> Optional[dict]:
    number = validate_number(value)
    return {"number": number} if number is not None else None


def date_value(value) -> Optional[dict]:
    start = validate_date(value)
    return {"date": {"start": start}} if start else None


def file_value(name: str, value: str) -> Optional[dict]:
    url = validate_url(value)
    return {"files": [{"name": name, "external": {"url": url}}]} if url else None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class NotionPageWriter:
    """
    Writes importer output to the Notion database.

    Primary pages are found through a PageDirectory snapshot (exact title,
    then normalized title). Placeholder pages are looked up live by exact
    title so a placeholder written earlier in the same run is found again.

    Usage:
        writer = NotionPageWriter(client, settings.NOTION_DATABASE_ID, directory)
        outcome = writer.upsert_primary(record)
    """

    def __init__(
        self,
        client: NotionClient,
        database_id: str,
        directory: Optional[PageDirectory] = None,
        clock=_now,
    ):
        self.client = client
        self.database_id = database_id
        self.directory = directory or PageDirectory()
        self.clock = clock

    # Properties

    def founder_properties(self, record: ReconciledRecord) -> dict:
        row = record.primary_row
        metrics = record.derived_metrics

        properties = {
            "Name": title_value(record.display_name),
            "Form Type": select_value(FormCategory.FOUNDER.label),
            "Founder Name": text_value(row.text(FounderColumns.FOUNDER_NAME)),
            "Founder Email": email_value(row.text(FounderColumns.FOUNDER_EMAIL)),
            "Founder Phone Number": phone_value(row.text(FounderColumns.FOUNDER_PHONE)),
            "Founder LinkedIn": url_value(row.text(FounderColumns.FOUNDER_LINKEDIN)),
            "Company Website": url_value(row.text(FounderColumns.COMPANY_WEBSITE)),
            "Status": select_value(metrics.tier_label),
            "Business Model": multi_select_value(parse_comma_list(row.text(FounderColumns.BUSINESS_MODEL))),
            "Where is the company based?": select_value(validate_location(row.text(FounderColumns.LOCATION))),
            "What is your current valuation?": select_value(validate_valuation(row.text(FounderColumns.VALUATION))),
            "What next stage is this round funding?": select_value(
                validate_funding_stage(row.text(FounderColumns.FUNDING_STAGE))
            ),
            "Founded in": number_value(row.text(FounderColumns.FOUNDED_IN)),
            "Deck": file_value("Deck", row.text(FounderColumns.DECK)),
            "Completion %": {"number": metrics.completion_percent},
            "Form filled out:": date_value(row.text(CommonColumns.SUBMITTED_AT)),
            "Last Updated": {"date": {"start": self.clock()}},
        }

        priorities = parse_comma_list(row.text(FounderColumns.PRIORITY_RANKING))
        for slot in range(PRIORITY_SLOTS):
            value = priorities[slot] if slot < len(priorities) else None
            properties[f"{slot + 1}. Priority (18 months)"] = select_value(value)

        return properties

    def searcher_properties(self, record: ReconciledRecord) -> dict:
        row = record.primary_row
        metrics = record.derived_metrics

        return {
            "Name": title_value(record.display_name),
            "Form Type": select_value(FormCategory.SEARCHER.label),
            "Intern v Searcher": select_value(coerce_intern_searcher(row.text(SearcherColumns.ROLE))),
            "SF Referrals": select_value(metrics.tier_label),
            "Searcher Mail": email_value(row.text(SearcherColumns.EMAIL)),
            "Searcher Phone": phone_value(row.text(SearcherColumns.PHONE)),
            "Searcher LinkedIn": url_value(row.text(SearcherColumns.LINKEDIN)),
            "Searcher Nickname": text_value(row.text(SearcherColumns.NICKNAME)),
            "Searcher Location": text_value(row.text(SearcherColumns.LOCATION)),
            "Searcher Availability": select_value(
                map_availability_option(row.text(SearcherColumns.TOUCHPOINT_WINDOW))
            ),
            "Start of Availability": text_value(row.text(SearcherColumns.START_OF_AVAILABILITY)),
            "Searcher CV": file_value("CV", row.text(SearcherColumns.CV)),
            "Completion %": {"number": metrics.completion_percent},
            "Form filled out:": date_value(row.text(CommonColumns.SUBMITTED_AT)),
            "Last Updated": {"date": {"start": self.clock()}},
        }

    def primary_properties(self, record: ReconciledRecord) -> dict:
        if record.kind is SubmissionKind.FOUNDER:
            return self.founder_properties(record)
        return self.searcher_properties(record)

    def placeholder_properties(self, placeholder: UnmatchedPlaceholder) -> dict:
        first = placeholder.rows[0] if placeholder.rows else FormRow([])
        return {
            "Name": title_value(placeholder_title(placeholder.kind, placeholder.display_name)),
            "Form Type": select_value(FormCategory.referral_for(placeholder.kind).label),
            TIER_PROPERTY[placeholder.kind]: select_value(UNMATCHED_STATUS),
            "Form filled out:": date_value(first.text(CommonColumns.SUBMITTED_AT)),
            "Last Updated": {"date": {"start": self.clock()}},
        }

    # Pages

    def upsert_primary(self, record: ReconciledRecord) -> UpsertOutcome:
        """
        Create or update the page for a primary record, then sync its content.

        Raises:
            NotionAPIError: any write failed after retries
        """
        properties = self.primary_properties(record)
        page = self.directory.find(record.display_name)

        if page is None:
            logger.info(f"Creating page for {record.kind.value} '{record.display_name}'")
            page = self.client.create_page(self.database_id, properties)
            self.directory.remember(page)
            outcome = UpsertOutcome(page_id=page["id"], created=True)
        else:
            logger.info(f"Updating page for {record.kind.value} '{record.display_name}'")
            # Keep the existing title; the page may have been renamed by hand
            properties.pop("Name", None)
            self.client.update_page_properties(page["id"], properties)
            outcome = UpsertOutcome(page_id=page["id"], updated=True)

        self.write_primary_content(outcome.page_id, record)
        return outcome

    def upsert_placeholder(self, placeholder: UnmatchedPlaceholder) -> UpsertOutcome:
        """Create or refresh the placeholder page for an unclaimed referral bucket."""
        title = placeholder_title(placeholder.kind, placeholder.display_name)
        properties = self.placeholder_properties(placeholder)
        page = self.client.find_page_by_title(self.database_id, title)

        if page is None:
            logger.info(f"Creating placeholder '{title}'")
            page = self.client.create_page(self.database_id, properties)
            outcome = UpsertOutcome(page_id=page["id"], created=True)
        else:
            logger.info(f"Refreshing placeholder '{title}'")
            properties.pop("Name", None)
            self.client.update_page_properties(page["id"], properties)
            outcome = UpsertOutcome(page_id=page["id"], updated=True)

        form_id = self.ensure_toggles(outcome.page_id, [FORM_TOGGLE_TITLE])[FORM_TOGGLE_TITLE]
        insight_id = self.ensure_toggles(form_id, [REFERRAL_INSIGHT_TITLE])[REFERRAL_INSIGHT_TITLE]

        # Placeholder content is rebuilt from scratch every run
        for child in self.client.list_blocks(insight_id):
            if not child.get("archived"):
                self.client.archive_block(child["id"])
        self.write_referrals(insight_id, placeholder.rows, placeholder.kind)

        return outcome

    def retire_placeholder(self, kind: SubmissionKind, display_name: str) -> bool:
        """Archive the placeholder page for ``display_name``; False when there is none."""
        title = placeholder_title(kind, display_name)
        page = self.client.find_page_by_title(self.database_id, title)
        if page is None:
            return False
        self.client.archive_page(page["id"])
        self.directory.forget(page["id"])
        return True

    # Content

    def ensure_toggles(self, parent_id: str, titles: list[str], new_children: Optional[dict] = None) -> dict:
        """
        Make sure one toggle per title exists under ``parent_id``.

        Missing toggles are appended (with ``new_children[title]`` as their
        initial content); when a title appears more than once the first
        toggle is kept and the rest archived.

        Returns:
            Mapping of title -> block id
        """
        return self._ensure_toggles(parent_id, titles, new_children)[0]

    def _ensure_toggles(self, parent_id: str, titles: list[str], new_children: Optional[dict] = None):
        new_children = new_children or {}
        children = self.client.list_blocks(parent_id)

        found = {}
        for child in children:
            if not blocks.is_toggle(child):
                continue
            title = blocks.block_text(child)
            if title not in titles:
                continue
            if title in found:
                logger.debug(f"Archiving duplicate toggle '{title}'")
                self.client.archive_block(child["id"])
                continue
            found[title] = child["id"]

        missing = [title for title in titles if title not in found]
        if missing:
            created = self.client.append_blocks(
                parent_id,
                [blocks.toggle(title, new_children.get(title)) for title in missing],
            )
            for title, block in zip(missing, created):
                found[title] = block["id"]

        return found, missing

    def sync_quote_toggles(self, parent_id: str, items: list[tuple[str, str]]):
        """
        Question toggles, each holding its answer as a quote.

        Existing quotes are rewritten only when the answer changed.
        """
        answers = {label: answer or NO_RESPONSE for label, answer in items}
        new_children = {label: [blocks.quote(answer)] for label, answer in answers.items()}
        toggle_ids, created = self._ensure_toggles(parent_id, list(answers), new_children)

        for label, toggle_id in toggle_ids.items():
            if label in created:
                continue
            self.upsert_quote(toggle_id, answers[label])

    def upsert_quote(self, parent_id: str, text: str):
        text = text[:blocks.MAX_TEXT_LENGTH]
        quotes = [b for b in self.client.list_blocks(parent_id) if b.get("type") == "quote" and not b.get("archived")]
        if not quotes:
            self.client.append_blocks(parent_id, [blocks.quote(text)])
            return
        current = quotes[0]
        if blocks.block_text(current) != text:
            self.client.update_block(current["id"], {"quote": {"rich_text": blocks.rich_text(text)}})

    def sync_info_table(self, parent_id: str, pairs: list[tuple[str, str]]):
        """
        Two-column label/value table as the info block of a referral.

        Appended when missing; otherwise rows whose label matches are
        updated in place and missing trailing rows appended.
        """
        tables = [b for b in self.client.list_blocks(parent_id) if b.get("type") == "table" and not b.get("archived")]
        if not tables:
            self.client.append_blocks(parent_id, [blocks.table([[label, value] for label, value in pairs])])
            return

        table_id = tables[0]["id"]
        rows = self.client.list_blocks(table_id)
        for row_block, (label, value) in zip(rows, pairs):
            cells = blocks.table_row_cells(row_block)
            current_label = cells[0] if cells else ""
            current_value = cells[1] if len(cells) > 1 else ""
            if current_label == label and current_value != value:
                self.client.update_block(
                    row_block["id"],
                    {"table_row": {"cells": [blocks.rich_text(label), blocks.rich_text(value)]}},
                )

        extra = pairs[len(rows):]
        if extra:
            self.client.append_blocks(table_id, [blocks.table_row([label, value]) for label, value in extra])

    def write_sections(self, parent_id: str, row: FormRow, sections: dict, section_ids: Optional[dict] = None):
        """Question sections: one toggle per section, one quote toggle per question."""
        section_ids = section_ids or self.ensure_toggles(parent_id, list(sections))
        for title, columns in sections.items():
            items = [(question_label(index), row.text(index)) for index in columns]
            self.sync_quote_toggles(section_ids[title], items)

    def write_referrals(self, insight_id: str, referral_rows: list[FormRow], kind: SubmissionKind):
        """One "Referral i" toggle per referral row, with its info table and answers."""
        if not referral_rows:
            return

        titles = [f"Referral {i}" for i in range(1, len(referral_rows) + 1)]
        toggle_ids = self.ensure_toggles(insight_id, titles)

        for title, row in zip(titles, referral_rows):
            toggle_id = toggle_ids[title]
            if kind is SubmissionKind.FOUNDER:
                pairs = [(label, row.text(index)) for label, index in FOUNDER_REFERRAL_TABLE]
                self.sync_info_table(toggle_id, pairs)
                items = [(question_label(index), row.text(index)) for index in FounderReferralColumns.QUESTIONS]
                self.sync_quote_toggles(toggle_id, items)
            else:
                pairs = [(label, row.text(index)) for label, index in SEARCHER_REFERRAL_TABLE]
                self.sync_info_table(toggle_id, pairs)
                self.write_sections(toggle_id, row, REFERRAL_SECTIONS)

    def write_team_insights(self, parent_id: str, row: FormRow):
        count = team_member_count(row)
        if count == 0:
            return

        titles = [TEAM_MEMBER_TITLE.format(i) for i in range(1, count + 1)]
        toggle_ids = self.ensure_toggles(parent_id, titles)
        contact_width = len(TEAM_CONTACT_LABELS)

        for member, title in enumerate(titles):
            member_id = toggle_ids[title]
            answers = [row.text(index) for index in team_member_columns(member)]
            if member == 0:
                self.sync_quote_toggles(member_id, list(zip(TEAM_MEMBER_LABELS, answers)))
                continue
            # Later members: contact details as a table, the rest as answers
            self.sync_info_table(member_id, list(zip(TEAM_CONTACT_LABELS, answers[:contact_width])))
            self.sync_quote_toggles(member_id, list(zip(TEAM_MEMBER_LABELS[contact_width:], answers[contact_width:])))

    def write_team_inputs(self, team_id: str, kind: SubmissionKind):
        """Scaffolding the team fills in by hand; only missing pieces are added."""
        children = self.client.list_blocks(team_id)
        missing = []
        if not any(b.get("type") == "paragraph" for b in children):
            missing.append(blocks.paragraph(TEAM_INPUTS_INTRO))
        if kind is SubmissionKind.FOUNDER and not any(b.get("type") == "table" for b in children):
            missing.append(blocks.table([[label, ""] for label in DEAL_TABLE_LABELS]))
        self.client.append_blocks(team_id, missing)

        notes = self.ensure_toggles(
            team_id,
            [ASSESSMENT_NOTES_TITLE],
            {ASSESSMENT_NOTES_TITLE: [blocks.quote("")]},
        )
        logger.debug(f"Team inputs ready ({notes[ASSESSMENT_NOTES_TITLE]})")

    def write_primary_content(self, page_id: str, record: ReconciledRecord):
        """Form sections, referral insight and team scaffolding for a primary page."""
        root = self.ensure_toggles(
            page_id,
            [FORM_TOGGLE_TITLE, TEAM_INPUTS_TITLE],
            {FORM_TOGGLE_TITLE: [blocks.paragraph(FORM_INTRO)]},
        )
        form_id = root[FORM_TOGGLE_TITLE]
        row = record.primary_row

        if record.kind is SubmissionKind.FOUNDER:
            titles = [REFERRAL_INSIGHT_TITLE, *FOUNDER_SECTIONS, TEAM_INSIGHTS_TITLE]
            sections = FOUNDER_SECTIONS
        else:
            titles = [REFERRAL_INSIGHT_TITLE, *SEARCHER_SECTIONS]
            sections = SEARCHER_SECTIONS

        section_ids = self.ensure_toggles(form_id, titles)

        self.write_referrals(section_ids[REFERRAL_INSIGHT_TITLE], record.matched_referral_rows, record.kind)

        self.write_sections(form_id, row, sections, section_ids)

        if record.kind is SubmissionKind.FOUNDER:
            self.write_team_insights(section_ids[TEAM_INSIGHTS_TITLE], row)

        self.write_team_inputs(root[TEAM_INPUTS_TITLE], record.kind)
