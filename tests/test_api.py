from fleetos import models


VEHICLE = {"registration_number": "XY-987-ZT", "brand": "Ford", "model": "Transit", "year": 2021, "mileage": 1500}
PART = {"name": "Air filter", "reference": "AF-100", "quantity": 3, "min_quantity": 5, "unit_price": 18.0}


# --- Vehicles ---

def test_vehicle_crud(client, auth_headers):
    manager = auth_headers("workshop_manager")

    created = client.post("/api/vehicles/", json=VEHICLE, headers=manager)
    assert created.status_code == 201
    vehicle_id = created.json()["id"]
    assert created.json()["status"] == "operational"

    duplicate = client.post("/api/vehicles/", json=VEHICLE, headers=manager)
    assert duplicate.status_code == 409

    patched = client.patch(f"/api/vehicles/{vehicle_id}", json={"mileage": 2000}, headers=manager)
    assert patched.json()["mileage"] == 2000

    listing = client.get("/api/vehicles/?search=transit", headers=auth_headers("user")).json()
    assert listing["total"] == 1

    assert client.delete(f"/api/vehicles/{vehicle_id}", headers=manager).status_code == 403
    assert client.delete(f"/api/vehicles/{vehicle_id}", headers=auth_headers("admin")).status_code == 204
    assert client.get(f"/api/vehicles/{vehicle_id}", headers=manager).status_code == 404


def test_vehicle_with_work_orders_cannot_be_deleted(client, auth_headers, vehicle, make_work_order):
    make_work_order(vehicle)
    response = client.delete(f"/api/vehicles/{vehicle.id}", headers=auth_headers("admin"))
    assert response.status_code == 409


def test_vehicle_create_requires_manager(client, auth_headers):
    response = client.post("/api/vehicles/", json=VEHICLE, headers=auth_headers("technician"))
    assert response.status_code == 403


def test_vehicle_list_requires_authentication(client):
    assert client.get("/api/vehicles/").status_code == 401


def test_invalid_vehicle_payload_is_bad_request(client, auth_headers):
    response = client.post("/api/vehicles/", json={"brand": "Ford"}, headers=auth_headers("admin"))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid request data"


# --- Schedules ---

def test_schedules_by_vehicle(client, auth_headers, vehicle):
    manager = auth_headers("workshop_manager")
    payload = {"vehicle_id": vehicle.id, "title": "Oil service", "frequency": "monthly", "frequency_value": 6}
    assert client.post("/api/maintenance-schedules/", json=payload, headers=manager).status_code == 201

    schedules = client.get(f"/api/maintenance-schedules/vehicle/{vehicle.id}", headers=manager).json()
    assert [s["title"] for s in schedules] == ["Oil service"]


# --- Parts ---

def test_low_on_stock_route(client, auth_headers):
    manager = auth_headers("workshop_manager")
    client.post("/api/parts/", json=PART, headers=manager)
    client.post("/api/parts/", json=dict(PART, reference="AF-200", quantity=10), headers=manager)

    response = client.get("/api/parts/low-on-stock", headers=auth_headers("user"))
    assert response.status_code == 200
    assert [p["reference"] for p in response.json()] == ["AF-100"]


def test_stock_adjustment_endpoint(client, auth_headers):
    manager = auth_headers("workshop_manager")
    part_id = client.post("/api/parts/", json=PART, headers=manager).json()["id"]

    response = client.patch(f"/api/parts/{part_id}/stock", json={"quantity_change": 7, "reason": "delivery"}, headers=manager)
    assert response.status_code == 200
    assert response.json()["quantity"] == 10


def test_part_delete_is_admin_only_and_blocked_when_used(client, auth_headers, part, vehicle, make_work_order):
    technician = auth_headers("technician")
    work_order = make_work_order(vehicle)
    client.post(f"/api/work-orders/{work_order.id}/parts", json={"part_id": part.id}, headers=technician)

    assert client.delete(f"/api/parts/{part.id}", headers=auth_headers("workshop_manager")).status_code == 403
    assert client.delete(f"/api/parts/{part.id}", headers=auth_headers("admin")).status_code == 409


# --- Parts used ---

def test_parts_used_update_and_detach(client, db_session, auth_headers, part, vehicle, make_work_order):
    technician = auth_headers("technician")
    work_order = make_work_order(vehicle)
    usage = client.post(
        f"/api/work-orders/{work_order.id}/parts", json={"part_id": part.id, "quantity": 2}, headers=technician
    ).json()

    response = client.patch(f"/api/parts-used/{usage['id']}", json={"quantity": 4}, headers=technician)
    assert response.status_code == 200
    db_session.refresh(part)
    assert part.quantity == 6

    assert client.delete(f"/api/parts-used/{usage['id']}", headers=technician).status_code == 204
    db_session.refresh(part)
    assert part.quantity == 10

    parts = client.get(f"/api/work-orders/{work_order.id}/parts", headers=technician).json()
    assert parts == []


def test_detach_unknown_usage_returns_no_content(client, auth_headers):
    response = client.delete("/api/parts-used/31337", headers=auth_headers("technician"))
    assert response.status_code == 204


def test_detach_requires_technician(client, auth_headers):
    response = client.delete("/api/parts-used/1", headers=auth_headers("user"))
    assert response.status_code == 403


# --- Alerts ---

def test_alerts_include_personal_and_broadcast(client, db_session, auth_headers, make_user):
    headers = auth_headers("user")
    me = db_session.query(models.User).filter(models.User.username == "user_user").first()
    someone = make_user("someone_else")
    db_session.add_all([
        models.Alert(user_id=me.id, title="Yours", message="m", type=models.AlertType.WORK_ORDER),
        models.Alert(user_id=None, title="Everyone", message="m", type=models.AlertType.MAINTENANCE),
        models.Alert(user_id=someone.id, title="Not yours", message="m", type=models.AlertType.FUEL),
    ])
    db_session.commit()

    titles = {a["title"] for a in client.get("/api/alerts/", headers=headers).json()}
    assert titles == {"Yours", "Everyone"}

    mine = next(a for a in client.get("/api/alerts/", headers=headers).json() if a["title"] == "Yours")
    assert client.patch(f"/api/alerts/{mine['id']}/read", headers=headers).json()["is_read"] is True

    unread = {a["title"] for a in client.get("/api/alerts/unread", headers=headers).json()}
    assert unread == {"Everyone"}


def test_alert_create_is_manager_only(client, auth_headers):
    payload = {"title": "Inspection", "message": "Annual inspection due", "type": "maintenance"}
    assert client.post("/api/alerts/", json=payload, headers=auth_headers("technician")).status_code == 403
    created = client.post("/api/alerts/", json=payload, headers=auth_headers("workshop_manager"))
    assert created.status_code == 201
    assert created.json()["user_id"] is None


def test_cannot_delete_someone_elses_alert(client, db_session, auth_headers, make_user):
    other = make_user("other_user")
    alert = models.Alert(user_id=other.id, title="Private", message="m", type=models.AlertType.FUEL)
    db_session.add(alert)
    db_session.commit()

    assert client.delete(f"/api/alerts/{alert.id}", headers=auth_headers("technician")).status_code == 403
    assert client.delete(f"/api/alerts/{alert.id}", headers=auth_headers("admin")).status_code == 204


# --- Users ---

def test_technician_listing_and_role_change(client, auth_headers, make_user):
    make_user("mechanic", models.UserRole.TECHNICIAN)
    user = make_user("driver")

    technicians = client.get("/api/users/?role=technician", headers=auth_headers("workshop_manager")).json()
    assert [u["username"] for u in technicians] == ["mechanic"]

    assert client.patch(f"/api/users/{user.id}", json={"role": "technician"}, headers=auth_headers("workshop_manager")).status_code == 403
    promoted = client.patch(f"/api/users/{user.id}", json={"role": "technician"}, headers=auth_headers("admin"))
    assert promoted.json()["role"] == "technician"


def test_admin_cannot_delete_self(client, db_session, auth_headers):
    headers = auth_headers("admin")
    admin = db_session.query(models.User).filter(models.User.username == "admin_user").first()
    assert client.delete(f"/api/users/{admin.id}", headers=headers).status_code == 400


def test_deleting_technician_unassigns_work_orders(client, db_session, auth_headers, make_user, vehicle, make_work_order):
    tech = make_user("leaving_tech", models.UserRole.TECHNICIAN)
    work_order = make_work_order(vehicle, technician_id=tech.id)

    assert client.delete(f"/api/users/{tech.id}", headers=auth_headers("admin")).status_code == 204
    db_session.expire_all()
    assert db_session.get(models.WorkOrder, work_order.id).technician_id is None
