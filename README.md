# drinkctl

`drinkctl` runs the controller of a drink-mixing machine. It keeps recipes
and ingredients in an SQLite database, pours queued drink orders by writing
them to the dispenser's SPI device, and offers an admin service over TCP
(port 7913 by default) through which a remote client can manage drinks and
ingredients.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

Start the controller (database, order worker and admin service):

```
drinkctl --help
drinkctl --database drinks.db --log-dir . --port 7913
```

Options:

- `--database` – SQLite file (default `/home/root/drinksdatabase.db`); the
  `Drinks`, `Ingredienser` and `Bestillinger` tables are created if missing.
- `--log-dir` – directory for the log file, which is named after the current
  date (`DDMMYYYY`) and appended to (default `/home/root`).
- `--device` – SPI device of the dispenser (default `/dev/spidev`).
- `--host`, `--port` – address the admin service listens on.

Start a stand-in server that accepts one message per connection and prints
it until a client sends `EXIT`; useful for checking a client:

```
drinkctl-responder --port 7913
```

## Admin protocol

Messages are fields each followed by a colon, the first being a numeric
command from `drinkctl.protocol.Command`; for example `0:Mojito:` asks
whether a drink named *Mojito* exists. Replies are `TRUE`, `FALSE`, a number,
or a colon-terminated list. `CHANGEDRINK` and `CREATEINGREDIENT` get no
reply; an unrecognised command gets `UNKNOWN COMMAND`. `CLEAN` and
`CLEAN_WATER` run the dispenser's cleaning cycles and answer `WATER` and
`ADD_NORMAL`. `drinkctl.protocol.encode`, `decode` and `split_fields` build
and take apart messages.

## Library use

- `drinkctl.drink.Drink` – a name, a picture path and five `DrinkContent`
  slots (ingredient name and amount); unset values are `NOT_DECLARED`.
- `drinkctl.database.DrinkDatabase` – stores drinks, ingredients (name and
  container address) and orders. Failures raise `DatabaseError`, which
  carries an `ErrorCode`; `error_text` turns a code into its name.
- `drinkctl.admin.Admin` – administrative operations on a database; its
  `handle` method takes one protocol message and returns the reply (or
  `None`).
- `drinkctl.server.Server` – the TCP admin service around an `Admin`
  (`serve_forever`, `shutdown`).
- `drinkctl.orderadmin.OrderAdmin` – `order_drinks` queues a confirmed
  order, and a worker started with `start` pours it on the device.
- `drinkctl.client.AdminClient` – talks to a running controller through a
  `Client(host, port)`: `check_name_drink`, `get_drink`, `create_drink`,
  `change_drink`, `create_ingredient`, `ingredient_address`, `check_stock`
  and more.

```python
from drinkctl.client import AdminClient, Client

admin = AdminClient(client=Client("127.0.0.1", 7913))
print(admin.check_name_drink("Mojito"))
```

## What it does not do

- There is no graphical or interactive user interface. The controller
  (`drinkctl.controller.Controller`) only prints messages to the console and
  confirms every order, and the `drinkctl` command offers no way to place an
  order; orders are placed from Python with `OrderAdmin.order_drinks`.
- The server does not answer `GETERROR`; `AdminClient.error_text` therefore
  receives `UNKNOWN COMMAND`.