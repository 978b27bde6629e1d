"""Printable HTML for ingredient and order slips."""

from datetime import datetime
from html import escape

from catering_orders.domain.slips import (
    CategoryBucket,
    IngredientSlip,
    OrderSlip,
    SlipCustomer,
    SlipDish,
)


def format_amount(value: float) -> str:
    """Format an amount with at most four decimals and no trailing zeros."""
    text = f"{round(value, 4):.4f}".rstrip("0").rstrip(".")
    return "0" if text in {"", "-0"} else text


def render_ingredient_slip(
    slip: IngredientSlip, *, print_delay_ms: int, generated_at: datetime
) -> str:
    """Render the ingredient requirements of an order or order group."""
    body = [
        _header("Ingredient Slip", slip),
        _customer_block(slip.customer, full=False),
        _dish_list(slip.dishes),
        "<h2>Required Ingredients</h2>",
    ]
    if slip.buckets:
        body.extend(_bucket_table(bucket) for bucket in slip.buckets)
    else:
        body.append('<p class="empty">No ingredients listed.</p>')
    if slip.skipped_lines:
        body.append(
            f'<p class="warning">{slip.skipped_lines} ingredient line(s) could not '
            "be read and are not listed.</p>"
        )
    return _page(
        f"Ingredient Slip #{slip.primary_order_id}",
        "\n".join(body),
        print_delay_ms=print_delay_ms,
        generated_at=generated_at,
    )


def render_order_slip(
    slip: OrderSlip, *, print_delay_ms: int, generated_at: datetime
) -> str:
    """Render customer details and the dishes of an order or order group."""
    rows = "\n".join(
        f"<tr><td>{escape(dish.dish_name)}</td>"
        f"<td>{format_amount(dish.quantity)} {escape(dish.unit)}</td></tr>"
        for dish in slip.dishes
    )
    body = [
        _header("Order Slip", slip),
        _customer_block(slip.customer, full=True),
        "<table><thead><tr><th>Dish</th><th>Quantity</th></tr></thead>"
        f"<tbody>\n{rows}\n</tbody></table>",
    ]
    placed_at = next(
        (dish.created_at for dish in slip.dishes if dish.created_at), None
    )
    if placed_at is not None:
        body.append(
            f"<p><strong>Order date/time:</strong> "
            f"{placed_at.strftime('%Y-%m-%d %H:%M')}</p>"
        )
    delivery = " ".join(
        part for part in (slip.delivery_date, slip.delivery_time) if part
    )
    if delivery:
        body.append(f"<p><strong>Delivery:</strong> {escape(delivery)}</p>")
    if slip.delivery_address:
        body.append(
            f"<p><strong>Deliver to:</strong> {escape(slip.delivery_address)}</p>"
        )
    return _page(
        f"Order Slip #{slip.primary_order_id}",
        "\n".join(body),
        print_delay_ms=print_delay_ms,
        generated_at=generated_at,
    )


def _header(title: str, slip: IngredientSlip | OrderSlip) -> str:
    lines = [
        f"<h1>{title}</h1>",
        f'<p class="order">Order #{slip.primary_order_id}</p>',
    ]
    if slip.is_group:
        joined = ", ".join(f"#{order_id}" for order_id in slip.order_ids)
        lines.append(f'<p class="group">Combined order: {joined}</p>')
    return "\n".join(lines)


def _customer_block(customer: SlipCustomer, *, full: bool) -> str:
    if not customer.name:
        return ""
    lines = [f'<p class="customer">Customer: {escape(customer.name)}</p>']
    if customer.phone:
        lines.append(f"<p>Phone: {escape(customer.phone)}</p>")
    if full and customer.email:
        lines.append(f"<p>Email: {escape(customer.email)}</p>")
    if full and customer.address:
        lines.append(f"<p>Address: {escape(customer.address)}</p>")
    return '<div class="customer-block">' + "".join(lines) + "</div>"


def _dish_list(dishes: list[SlipDish]) -> str:
    items = "".join(
        f"<li>{escape(dish.dish_name)} &bull; "
        f"{format_amount(dish.quantity)} {escape(dish.unit)}</li>"
        for dish in dishes
    )
    return f'<ul class="dishes">{items}</ul>'


def _bucket_table(bucket: CategoryBucket) -> str:
    rows = "\n".join(
        f"<tr><td>{escape(line.name)}</td><td>{format_amount(line.amount)}</td>"
        f"<td>{escape(line.unit)}</td></tr>"
        for line in bucket.lines
    )
    return (
        f"<h3>{escape(bucket.category)}</h3>"
        "<table><thead><tr><th>Ingredient</th><th>Amount</th><th>Unit</th></tr>"
        f"</thead><tbody>\n{rows}\n</tbody></table>"
    )


def _page(
    title: str, body: str, *, print_delay_ms: int, generated_at: datetime
) -> str:
    return _PAGE_TEMPLATE.format(
        title=escape(title),
        body=body,
        generated_at=generated_at.strftime("%Y-%m-%d %H:%M"),
        print_delay_ms=max(print_delay_ms, 0),
    )


_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{title}</title>
    <style>
      body {{ font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }}
      h1 {{ margin-bottom: 0.25rem; }}
      table {{ border-collapse: collapse; width: 100%; margin-bottom: 1rem; }}
      th, td {{ border-bottom: 1px solid #ddd; padding: 0.3rem 0.5rem; }}
      th {{ text-align: left; }}
      .warning {{ color: #b23a48; }}
      footer {{ margin-top: 2rem; color: #666; font-size: 0.85rem; }}
      @media print {{ .no-print {{ display: none; }} }}
    </style>
  </head>
  <body>
    <div class="no-print">
      <a href="/orders">&larr; Back to orders</a>
      <button onclick="window.print()">Print</button>
    </div>
{body}
    <footer>Generated on {generated_at}</footer>
    <script>
      window.addEventListener('load', function () {{
        setTimeout(function () {{ window.print(); }}, {print_delay_ms});
      }});
    </script>
  </body>
</html>
"""
