import csv
import io

from domain.credential import CSV_COLUMNS


def test_export_header_and_column_order(csv_export_service, owner):
    output = csv_export_service.export_csv(owner.user_id)

    assert output.splitlines()[0] == (
        "platform,accountName,url,username,password,accountIdentity,"
        "accountType,status,specialPin,recoveryNumber,recoveryEmail"
    )
    assert CSV_COLUMNS == output.splitlines()[0].split(",")


def test_export_rows_newest_first_with_quoting(credential_service, csv_export_service, owner, other_owner, credential_data):
    credential_service.create_credential(owner.user_id, credential_data(platform="Old", account_name="a, b"))
    credential_service.create_credential(owner.user_id, credential_data(platform="New", password='say "hi"'))
    credential_service.create_credential(other_owner.user_id, credential_data(platform="Foreign"))

    rows = list(csv.DictReader(io.StringIO(csv_export_service.export_csv(owner.user_id))))

    assert [row['platform'] for row in rows] == ["New", "Old"]
    assert rows[0]['password'] == 'say "hi"'
    assert rows[1]['accountName'] == "a, b"
    assert rows[0]['accountName'] == ""


def test_exported_file_reimports_as_duplicates(credential_service, csv_export_service, csv_import_service, owner, credential_data):
    credential_service.create_credential(owner.user_id, credential_data(url="https://github.com", special_pin="42"))
    exported = csv_export_service.export_csv(owner.user_id)

    result = csv_import_service.import_csv(owner.user_id, io.BytesIO(exported.encode("utf-8")))

    assert result.total == 1
    assert result.created == 0
    assert len(result.errors) == 1
