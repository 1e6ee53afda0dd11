from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from consolidator.models import (
    CategorizationRule,
    Category,
    ImportBatch,
    ImportProfile,
    RuleActionType,
    Transaction,
)
from consolidator.services.errors import ImportStorageError, ProfileConfigurationError
from consolidator.services.import_service import ImportService, UploadedFile, decode_content
from consolidator.services.rule_service import reapply_stored_rules


def _citibank(service: ImportService):
    profile = next(p for p in service.get_profiles() if p.name == "Citibank (No Header)")
    return service.load_profile(profile.id)


def _add_rule(db, keyword, action, category=None, priority=0):
    db.add(CategorizationRule(name=keyword.title(), keyword=keyword, action=action,
                              category=category, priority=priority))
    db.flush()


def test_new_database_is_seeded(db):
    names = {p.name for p in ImportService(db).get_profiles()}
    assert names == {"Chase", "Bank of America", "Wells Fargo", "Citibank (No Header)"}
    assert db.query(Category).filter(Category.name == "Uncategorized").count() == 1


def test_import_files_stores_one_batch_per_file(db):
    groceries = Category(name="Groceries")
    db.add(groceries)
    _add_rule(db, "GROCERY", RuleActionType.CATEGORIZE, groceries)

    service = ImportService(db)
    result = service.import_files(
        [
            UploadedFile("jan.csv", "2024-01-15,x,GROCERY MART,-45.20\n,,,\n"),
            UploadedFile("feb.csv", "2024-02-01,x,SALARY,2000.00\n"),
        ],
        _citibank(service),
    )

    assert [f.filename for f in result.files] == ["jan.csv", "feb.csv"]
    assert result.imported_count == 2
    assert result.rejected_count == 1

    batches = service.get_imports()
    assert {b.filename: b.transaction_count for b in batches} == {"jan.csv": 1, "feb.csv": 1}

    stored = db.query(Transaction).order_by(Transaction.posted_date).all()
    assert [tx.category.name for tx in stored] == ["Groceries", "Uncategorized"]
    assert stored[0].amount == Decimal("-45.20")
    assert stored[0].amount_cents == -4520


def test_rule_snapshot_ignores_later_edits(db):
    service = ImportService(db)
    snapshot = service.snapshot(_citibank(service))
    _add_rule(db, "RENT", RuleActionType.IGNORE)

    service.import_file(UploadedFile("a.csv", "2024-01-01,x,RENT,-900\n"), snapshot)
    assert db.query(Transaction).one().ignored is False


def test_category_missing_from_catalog_stores_uncategorized(db):
    service = ImportService(db)
    snapshot = service.snapshot(_citibank(service))
    # Catalog snapshot taken before the rule's category existed
    pets = Category(name="Pets")
    _add_rule(db, "VET", RuleActionType.CATEGORIZE, pets)
    snapshot.rules = service.snapshot(snapshot.profile).rules

    service.import_file(UploadedFile("a.csv", "2024-01-01,x,VETVISIT,-1\n2024-01-02,x,VET,-2\n"), snapshot)
    categories = [tx.category.name for tx in db.query(Transaction).order_by(Transaction.id)]
    assert categories == ["Uncategorized", "Uncategorized"]


def test_delete_import_removes_transactions(db):
    service = ImportService(db)
    result = service.import_files([UploadedFile("a.csv", "2024-01-01,x,A,1\n")], _citibank(service))

    assert service.delete_import(result.files[0].batch_id) is True
    assert db.query(Transaction).count() == 0
    assert db.query(ImportBatch).count() == 0
    assert service.delete_import(result.files[0].batch_id) is False


def test_invalid_stored_profile(db):
    bad = ImportProfile(name="Bad", date_column="Date", description_column="Description",
                        amount_column="Amount", date_format="YY.MM.DD")
    db.add(bad)
    db.flush()
    with pytest.raises(ProfileConfigurationError):
        ImportService(db).load_profile(bad.id)
    assert ImportService(db).load_profile(9999) is None


def test_reapply_stored_rules_respects_manual_override(db):
    dining = Category(name="Dining")
    db.add(dining)
    service = ImportService(db)
    service.import_files(
        [UploadedFile("a.csv", "2024-01-01,x,COFFEE BAR,-4\n2024-01-02,x,COFFEE BAR,-5\n")],
        _citibank(service),
    )
    manual, auto = db.query(Transaction).order_by(Transaction.id).all()
    manual.manual_override = True
    _add_rule(db, "COFFEE", RuleActionType.CATEGORIZE, dining)

    outcome = reapply_stored_rules(db)

    assert outcome.recategorized_count == 1
    assert outcome.skipped_manual_count == 1
    db.refresh(manual)
    db.refresh(auto)
    assert manual.category.name == "Uncategorized"
    assert auto.category.name == "Dining"


def test_decode_content_drops_bom():
    assert decode_content("\ufeffDate".encode("utf-8")) == "Date"


def test_oversized_amount_does_not_lose_the_file(db):
    service = ImportService(db)
    result = service.import_files(
        [UploadedFile("a.csv", "2024-01-01,x,GOOD,-1\n2024-01-02,x,BAD,1e30\n2024-01-03,x,OK,-2\n")],
        _citibank(service),
    )
    assert result.imported_count == 2
    assert result.rejected_count == 1
    assert sorted(tx.amount_cents for tx in db.query(Transaction)) == [-200, -100]


def test_flush_failure_raises_import_storage_error(db):
    def fail_batch_insert(session, flush_context, instances):
        if any(isinstance(obj, ImportBatch) for obj in session.new):
            raise OperationalError("INSERT INTO import_batches", {}, Exception("disk I/O error"))

    service = ImportService(db)
    snapshot = service.snapshot(_citibank(service))
    event.listen(db, "before_flush", fail_batch_insert)
    try:
        with pytest.raises(ImportStorageError) as excinfo:
            service.import_file(UploadedFile("a.csv", "2024-01-01,x,A,1\n"), snapshot)
    finally:
        event.remove(db, "before_flush", fail_batch_insert)
    assert excinfo.value.filename == "a.csv"
