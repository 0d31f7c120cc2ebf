from datetime import datetime

import pytest

from fleetos import models, schemas
from fleetos.exceptions import InvalidTransitionError, NotFoundError
from fleetos.services import inventory, work_orders
from fleetos.services.vehicle_status import has_active_work_orders

Status = models.WorkOrderStatus


def _put_in_maintenance(db_session, vehicle):
    vehicle.status = models.VehicleStatus.MAINTENANCE
    db_session.commit()


def test_completing_without_end_date_stamps_now(db_session, vehicle, make_work_order):
    work_order = make_work_order(vehicle, status=Status.IN_PROGRESS)
    before = datetime.utcnow()

    updated = work_orders.update_work_order(db_session, work_order.id, {"status": Status.COMPLETED})

    assert updated.status == Status.COMPLETED
    assert updated.end_date is not None
    assert before <= updated.end_date <= datetime.utcnow()


def test_explicit_end_date_is_kept(db_session, vehicle, make_work_order):
    work_order = make_work_order(vehicle, status=Status.IN_PROGRESS)
    end = datetime(2024, 3, 1, 17, 30)
    updated = work_orders.update_work_order(db_session, work_order.id, {"status": Status.COMPLETED, "end_date": end})
    assert updated.end_date == end


def test_completing_only_active_order_releases_vehicle(db_session, vehicle, make_work_order):
    _put_in_maintenance(db_session, vehicle)
    work_order = make_work_order(vehicle, status=Status.IN_PROGRESS)

    work_orders.update_work_order(db_session, work_order.id, {"status": Status.COMPLETED})

    db_session.refresh(vehicle)
    assert vehicle.status == models.VehicleStatus.OPERATIONAL


def test_completing_one_of_two_active_orders_keeps_maintenance(db_session, vehicle, make_work_order):
    _put_in_maintenance(db_session, vehicle)
    first = make_work_order(vehicle, status=Status.IN_PROGRESS)
    make_work_order(vehicle, status=Status.PENDING, title="Brakes")

    work_orders.update_work_order(db_session, first.id, {"status": Status.COMPLETED})

    db_session.refresh(vehicle)
    assert vehicle.status == models.VehicleStatus.MAINTENANCE
    assert has_active_work_orders(db_session, vehicle.id)


def test_cancelling_releases_vehicle(db_session, vehicle, make_work_order):
    _put_in_maintenance(db_session, vehicle)
    work_order = make_work_order(vehicle, status=Status.PENDING)

    work_orders.update_work_order(db_session, work_order.id, {"status": Status.CANCELLED})

    db_session.refresh(vehicle)
    assert vehicle.status == models.VehicleStatus.OPERATIONAL


def test_out_of_service_vehicle_is_left_alone(db_session, vehicle, make_work_order):
    vehicle.status = models.VehicleStatus.OUT_OF_SERVICE
    db_session.commit()
    work_order = make_work_order(vehicle, status=Status.IN_PROGRESS)

    work_orders.update_work_order(db_session, work_order.id, {"status": Status.COMPLETED})

    db_session.refresh(vehicle)
    assert vehicle.status == models.VehicleStatus.OUT_OF_SERVICE


def test_completing_pending_order_stamps_end_date_and_releases_vehicle(db_session, vehicle, make_work_order):
    _put_in_maintenance(db_session, vehicle)
    work_order = make_work_order(vehicle, status=Status.PENDING)

    updated = work_orders.update_work_order(db_session, work_order.id, {"status": Status.COMPLETED})

    assert updated.status == Status.COMPLETED
    assert updated.end_date is not None
    db_session.refresh(vehicle)
    assert vehicle.status == models.VehicleStatus.OPERATIONAL


def test_create_as_completed_stamps_end_date(db_session, vehicle):
    schedule = models.MaintenanceSchedule(
        vehicle_id=vehicle.id, title="Brake check",
        frequency=models.ScheduleFrequency.MONTHLY, frequency_value=6
    )
    db_session.add(schedule)
    db_session.commit()

    work_order = work_orders.create_work_order(db_session, schemas.WorkOrderCreate(
        vehicle_id=vehicle.id, title="Brake check", status=Status.COMPLETED, maintenance_schedule_id=schedule.id
    ))

    assert work_order.end_date is not None
    db_session.refresh(vehicle)
    assert vehicle.status == models.VehicleStatus.OPERATIONAL


@pytest.mark.parametrize("current, requested", [
    (Status.COMPLETED, Status.IN_PROGRESS),
    (Status.COMPLETED, Status.PENDING),
    (Status.COMPLETED, Status.CANCELLED),
    (Status.CANCELLED, Status.PENDING),
    (Status.IN_PROGRESS, Status.PENDING),
])
def test_illegal_transitions(current, requested):
    with pytest.raises(InvalidTransitionError):
        work_orders.check_transition(current, requested)


@pytest.mark.parametrize("current, requested", [
    (Status.PENDING, Status.IN_PROGRESS),
    (Status.PENDING, Status.CANCELLED),
    (Status.PENDING, Status.COMPLETED),
    (Status.IN_PROGRESS, Status.COMPLETED),
    (Status.IN_PROGRESS, Status.CANCELLED),
    (Status.COMPLETED, Status.COMPLETED),
])
def test_legal_transitions(current, requested):
    work_orders.check_transition(current, requested)


def test_rewriting_completed_status_keeps_end_date(db_session, vehicle, make_work_order):
    end = datetime(2024, 1, 10, 9, 0)
    work_order = make_work_order(vehicle, status=Status.COMPLETED, end_date=end)

    updated = work_orders.update_work_order(db_session, work_order.id, {"status": Status.COMPLETED, "cost": 120.0})

    assert updated.end_date == end
    assert updated.cost == 120.0


def test_create_from_schedule_holds_vehicle(db_session, vehicle):
    schedule = models.MaintenanceSchedule(
        vehicle_id=vehicle.id, title="Yearly service",
        frequency=models.ScheduleFrequency.YEARLY, frequency_value=1
    )
    db_session.add(schedule)
    db_session.commit()

    work_orders.create_work_order(db_session, schemas.WorkOrderCreate(
        vehicle_id=vehicle.id, title="Yearly service", maintenance_schedule_id=schedule.id
    ))

    db_session.refresh(vehicle)
    assert vehicle.status == models.VehicleStatus.MAINTENANCE


def test_create_without_schedule_leaves_vehicle(db_session, vehicle):
    work_orders.create_work_order(db_session, schemas.WorkOrderCreate(vehicle_id=vehicle.id, title="Noise"))
    db_session.refresh(vehicle)
    assert vehicle.status == models.VehicleStatus.OPERATIONAL


def test_create_for_missing_vehicle(db_session):
    with pytest.raises(NotFoundError):
        work_orders.create_work_order(db_session, schemas.WorkOrderCreate(vehicle_id=777, title="Ghost"))


def test_deleting_open_order_returns_parts_and_releases_vehicle(db_session, vehicle, part, make_work_order):
    _put_in_maintenance(db_session, vehicle)
    work_order = make_work_order(vehicle, status=Status.IN_PROGRESS)
    inventory.attach_part(db_session, work_order.id, part.id, 4)

    work_orders.delete_work_order(db_session, work_order.id)

    db_session.expire_all()
    assert db_session.query(models.WorkOrder).count() == 0
    assert db_session.query(models.PartUsed).count() == 0
    assert db_session.get(models.Part, part.id).quantity == 10
    assert db_session.get(models.Vehicle, vehicle.id).status == models.VehicleStatus.OPERATIONAL


def test_deleting_completed_order_keeps_parts_consumed(db_session, vehicle, part, make_work_order):
    work_order = make_work_order(vehicle, status=Status.IN_PROGRESS)
    inventory.attach_part(db_session, work_order.id, part.id, 4)
    work_orders.update_work_order(db_session, work_order.id, {"status": Status.COMPLETED})

    work_orders.delete_work_order(db_session, work_order.id)

    db_session.expire_all()
    assert db_session.query(models.WorkOrder).count() == 0
    assert db_session.query(models.PartUsed).count() == 0
    assert db_session.get(models.Part, part.id).quantity == 6


# --- API ---

def test_api_illegal_transition_is_conflict(client, auth_headers, vehicle, make_work_order):
    work_order = make_work_order(vehicle, status=Status.COMPLETED)
    response = client.patch(
        f"/api/work-orders/{work_order.id}", json={"status": "in_progress"}, headers=auth_headers("technician")
    )
    assert response.status_code == 409
    assert "completed" in response.json()["detail"]


def test_api_complete_pending_order(client, db_session, auth_headers, vehicle, make_work_order):
    _put_in_maintenance(db_session, vehicle)
    work_order = make_work_order(vehicle, status=Status.PENDING)

    response = client.patch(
        f"/api/work-orders/{work_order.id}", json={"status": "completed"}, headers=auth_headers("technician")
    )
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "completed"
    assert response.json()["end_date"] is not None

    db_session.expire_all()
    assert db_session.get(models.Vehicle, vehicle.id).status == models.VehicleStatus.OPERATIONAL


def test_api_detail_includes_parts_cost(client, db_session, auth_headers, vehicle, part, make_work_order):
    work_order = make_work_order(vehicle)
    headers = auth_headers("technician")

    response = client.post(f"/api/work-orders/{work_order.id}/parts", json={"part_id": part.id, "quantity": 2}, headers=headers)
    assert response.status_code == 201

    detail = client.get(f"/api/work-orders/{work_order.id}", headers=headers).json()
    assert len(detail["parts_used"]) == 1
    assert detail["parts_cost"] == 25.0


def test_api_attach_to_completed_order_is_conflict(client, auth_headers, vehicle, part, make_work_order):
    work_order = make_work_order(vehicle, status=Status.COMPLETED)
    response = client.post(
        f"/api/work-orders/{work_order.id}/parts", json={"part_id": part.id, "quantity": 1},
        headers=auth_headers("technician")
    )
    assert response.status_code == 409


def test_api_list_filters_and_paginates(client, auth_headers, vehicle, make_work_order):
    for i in range(3):
        make_work_order(vehicle, title=f"Job {i}")
    make_work_order(vehicle, status=Status.IN_PROGRESS, title="Running")
    headers = auth_headers("user")

    page = client.get("/api/work-orders/?limit=2&offset=0", headers=headers).json()
    assert page["total"] == 4
    assert len(page["items"]) == 2

    running = client.get("/api/work-orders/?status=in_progress", headers=headers).json()
    assert running["total"] == 1
    assert running["items"][0]["title"] == "Running"


def test_api_list_by_technician(client, db_session, auth_headers, make_user, vehicle, make_work_order):
    tech = make_user("tech_one", models.UserRole.TECHNICIAN)
    make_work_order(vehicle, technician_id=tech.id)
    make_work_order(vehicle, title="Unassigned")

    response = client.get(f"/api/work-orders/technician/{tech.id}", headers=auth_headers("technician"))
    assert response.status_code == 200
    assert [wo["technician_id"] for wo in response.json()] == [tech.id]


def test_api_create_requires_manager(client, auth_headers, vehicle):
    payload = {"vehicle_id": vehicle.id, "title": "Tyres"}
    assert client.post("/api/work-orders/", json=payload, headers=auth_headers("technician")).status_code == 403
    assert client.post("/api/work-orders/", json=payload, headers=auth_headers("workshop_manager")).status_code == 201
