import json
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import dacite
from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, select_autoescape
from tqdm import tqdm

from .reconcile import reconcile
from .timeparse import format_flight_date
from ..baggage.policies import DEFAULT_TABLES, PolicyTables
from ..baggage.resolver import format_baggage_info, is_low_cost_carrier, resolve_allowance
from ..errors import OfferFileError
from ..models import FlightOffer, OfferReport

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / 'templates'


class OfferProcessor:
    """Runs raw provider offers through the reconciler and the baggage resolver."""

    def __init__(self, tables: PolicyTables | None = None):
        self.tables = tables or DEFAULT_TABLES

    # ---------------- loading -----------------
    @staticmethod
    def parse_offers(raw: object) -> list[FlightOffer]:
        if not isinstance(raw, list):
            raise OfferFileError(f'Expected a list of offers, got {type(raw).__name__}')
        offers = []
        for index, item in enumerate(raw):
            try:
                offers.append(dacite.from_dict(data_class=FlightOffer, data=item))
            except (dacite.DaciteError, TypeError, AttributeError) as e:
                raise OfferFileError(f'Offer #{index} is malformed: {e}') from e
        return offers

    def load_offers(self, path: Path) -> list[FlightOffer]:
        try:
            with open(path, 'rt', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise OfferFileError(f'Cannot read offers file {path}: {e}') from e
        offers = self.parse_offers(loaded)
        logging.info('Loaded %d offers from %s', len(offers), path)
        return offers

    # ---------------- core steps -----------------
    def process_offer(self, offer: FlightOffer) -> OfferReport:
        times = reconcile(offer.departure, offer.arrival, offer.duration, offer.departure_date)
        allowance = resolve_allowance(offer.airline, offer.fare_tier, offer.cabin_class, self.tables)
        return OfferReport(
            offer=offer,
            times=times,
            allowance=allowance,
            baggage=format_baggage_info(allowance),
            low_cost=is_low_cost_carrier(offer.airline, self.tables),
        )

    def process_offers(self, offers: Iterable[FlightOffer]) -> list[OfferReport]:
        reports = [self.process_offer(offer) for offer in tqdm(offers, desc='Reconciling offers', leave=False)]
        unresolved = sum(1 for r in reports if r.times.duration_minutes == 0)
        if unresolved:
            logging.warning('%d of %d offers have no usable duration', unresolved, len(reports))
        return reports

    # ---------------- formatting -----------------
    @staticmethod
    def render_html(reports: list[OfferReport]) -> str:
        rows = []
        for report in sorted(reports, key=lambda r: (r.times.departure_date, r.times.departure_time)):
            times = report.times
            rows.append({
                'airline': report.offer.airline,
                'flight_number': report.offer.flight_number or '',
                'departure_date': format_flight_date(times.departure_date, 'long'),
                'departure_time': times.departure_time,
                'arrival_date': format_flight_date(times.arrival_date),
                'arrival_time': times.arrival_time,
                'days_difference': times.days_difference,
                'duration': times.duration,
                'cabin_class': report.offer.cabin_class,
                'cabin_text': report.baggage.cabin_text,
                'checked_text': report.baggage.checked_text,
                'personal_item_text': report.baggage.personal_item_text,
                'additional_bag_price': report.allowance.additional_bag_price,
                'low_cost': report.low_cost,
            })
        env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=select_autoescape(['html', 'xml']))
        tpl = env.get_template('itineraries.html.j2')
        generated_at = datetime.now().strftime("%d.%m.%Y %H:%M")
        rendered = tpl.render(offers=rows, generated_at=generated_at)
        soup = BeautifulSoup(rendered, 'lxml')
        return soup.prettify()
